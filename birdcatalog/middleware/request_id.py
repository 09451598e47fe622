"""
Bird Catalogue — Request ID Middleware
========================================

What:  Tags each request with a short correlation id and echoes it back in
       the X-Request-ID response header.
How:   Reuses the id the client sent in X-Request-ID, otherwise generates
       one; stores it in a ContextVar so loggers and exception handlers can
       include it.
When:  Outermost application middleware (runs before request logging).
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

# Coroutine-local: concurrent requests on one event loop each see their own id
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def new_request_id() -> str:
    """First 8 hex characters of a random UUID."""
    return uuid.uuid4().hex[:8]


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Assigns a request id and returns it in the response headers.

    The id is also kept on `request.state.request_id` for handlers.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get(REQUEST_ID_HEADER) or new_request_id()

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = rid
        return response
