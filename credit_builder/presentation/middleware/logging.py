"""Access logging and HTTP metrics."""

import time
from typing import Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from credit_builder.core.config import settings
from credit_builder.core.metrics import record_http_request

logger = structlog.get_logger(__name__)


def _endpoint_label(request: Request) -> str:
    """Route template for metric labels, so ids do not explode cardinality."""
    route = request.scope.get("route")
    return getattr(route, "path", None) or "unmatched"


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    One log line when a request arrives and one when it finishes.

    The request id is already bound to the structlog context by
    RequestContextMiddleware, which must wrap this middleware.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        started = time.perf_counter()
        log = logger.bind(method=request.method, path=request.url.path)
        log.info("request_started", query=str(request.query_params) or None)

        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        except Exception as exc:
            log.error("request_failed", error=str(exc), error_type=type(exc).__name__)
            raise
        finally:
            elapsed = time.perf_counter() - started
            log.info(
                "request_completed",
                status_code=status_code,
                duration_ms=round(elapsed * 1000, 2),
            )
            if settings.metrics_enabled:
                record_http_request(
                    request.method, _endpoint_label(request), status_code, elapsed
                )
