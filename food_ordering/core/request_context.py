from __future__ import annotations

from contextvars import ContextVar, Token
from dataclasses import dataclass, replace
from typing import Optional


@dataclass(frozen=True)
class RequestContext:
    request_id: Optional[str] = None
    user_id: Optional[str] = None


_EMPTY = RequestContext()
_CURRENT: ContextVar[RequestContext] = ContextVar("request_context", default=_EMPTY)


def current_context() -> RequestContext:
    return _CURRENT.get()


def bind_request(request_id: str) -> Token:
    """Start a fresh context for one request; pass the token to ``release``."""
    return _CURRENT.set(RequestContext(request_id=request_id))


def bind_user(user_id: int | str) -> None:
    _CURRENT.set(replace(_CURRENT.get(), user_id=str(user_id)))


def release(token: Token) -> None:
    _CURRENT.reset(token)
