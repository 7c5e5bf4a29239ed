# food_ordering/deps.py
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from food_ordering.core.database import get_db
from food_ordering.core.request_context import bind_user
from food_ordering.models.user import User
from food_ordering.services.auth import decode_access_token

# Swagger "Authorize" posts the OAuth2 password form here
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/token")

logger = logging.getLogger(__name__)


def _extract_user_id(payload: Dict[str, Any]) -> Optional[int]:
    """Reads the user id from "sub", accepting an int or a numeric string."""
    raw = payload.get("sub", None)
    if raw is None:
        return None

    if isinstance(raw, int) and not isinstance(raw, bool):
        return raw

    if isinstance(raw, str):
        raw = raw.strip()
        if raw.isdigit():
            return int(raw)

    return None


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    request: Request,
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Validates the bearer token and loads the user it belongs to."""
    try:
        payload = decode_access_token(token)
    except ValueError:
        raise _unauthorized("Invalid or expired token")

    user_id = _extract_user_id(payload)
    if user_id is None:
        raise _unauthorized("Invalid token (missing user id)")

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        logger.warning("token for unknown user user_id=%s", user_id)
        raise _unauthorized("User not found")

    request.state.user = user
    bind_user(user.id)
    return user
