"""Per-request correlation id."""

import uuid
from contextvars import ContextVar
from typing import Optional

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

REQUEST_ID_HEADER = "X-Request-ID"

_request_id: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def get_request_id() -> Optional[str]:
    """Request id of the request being served, if any."""
    return _request_id.get()


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Accept the caller's X-Request-ID (or mint one), expose it to error
    envelopes and structlog, and echo it on the response.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex

        token = _request_id.set(request_id)
        with structlog.contextvars.bound_contextvars(request_id=request_id):
            try:
                response = await call_next(request)
            finally:
                _request_id.reset(token)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
