from __future__ import annotations

import logging
import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from food_ordering.core.metrics import request_metrics
from food_ordering.core.request_context import bind_request, release

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class ObservabilityMiddleware(BaseHTTPMiddleware):
    """Tags every request with an id, then records its metrics and one access log line."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        token = bind_request(request_id)
        started = time.perf_counter()

        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
            endpoint = _route_template(request)
            request_metrics.observe(
                endpoint=endpoint,
                method=request.method,
                status_code=status_code,
                duration_ms=elapsed_ms,
            )
            logger.info(
                "%s %s -> %s",
                request.method,
                endpoint,
                status_code,
                extra={
                    "user_id": _current_user_id(request),
                    "endpoint": endpoint,
                    "method": request.method,
                    "status_code": status_code,
                    "duration_ms": elapsed_ms,
                },
            )
            release(token)


def _route_template(request: Request) -> str:
    # /api/orders/12 and /api/orders/13 share one metrics key
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


def _current_user_id(request: Request) -> str | None:
    # the user dependency stores the customer on request.state
    user_id = getattr(getattr(request.state, "user", None), "id", None)
    return None if user_id is None else str(user_id)
