"""
Request logging middleware.

Binds the request id and the acting staff member into the structlog
context, so checkout, conversion and return events logged deeper in the
stack can be tied to one request and one actor.
"""

import time
import uuid
from collections.abc import Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from jewelpos.config import get_logger, get_settings

logger = get_logger(__name__)

REQUEST_CONTEXT_KEYS = ("request_id", "actor_id")


class LoggingMiddleware(BaseHTTPMiddleware):
    """Log one started/completed (or failed) pair per request."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable,
    ) -> Response:
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:12]
        request.state.request_id = request_id
        actor_id = request.headers.get(get_settings().api.actor_header)
        structlog.contextvars.bind_contextvars(request_id=request_id, actor_id=actor_id)

        started = time.perf_counter()
        logger.debug("request_started", method=request.method, path=request.url.path)

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "request_failed",
                method=request.method,
                path=request.url.path,
                error=str(e),
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            raise
        finally:
            structlog.contextvars.unbind_contextvars(*REQUEST_CONTEXT_KEYS)

        duration_ms = round((time.perf_counter() - started) * 1000, 2)
        log = logger.warning if response.status_code >= 500 else logger.info
        log(
            "request_completed",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=duration_ms,
            request_id=request_id,
            actor_id=actor_id,
        )

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"
        return response
