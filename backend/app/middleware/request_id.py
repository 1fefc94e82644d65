"""
Murmur Backend — Request ID Middleware
========================================

What:  Attaches a correlation id to every request and echoes it back in the
       `X-Request-ID` response header.
How:   Reuses the id a client sends in `X-Request-ID`, otherwise generates a
       short one. The id is kept in a ContextVar so loggers and exception
       handlers can read it without access to the request object.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one event loop each see their own id
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

REQUEST_ID_HEADER = "X-Request-ID"


def new_request_id() -> str:
    """8 hex chars are enough to correlate lines within one service's logs."""
    return uuid.uuid4().hex[:8]


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Assigns a unique id to each request for tracing.

    Behavior:
        1. Take `X-Request-ID` from the client if present, else generate one
        2. Store it in `request_id_var` and `request.state.request_id`
        3. Copy it onto the response headers
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get(REQUEST_ID_HEADER) or new_request_id()

        token = request_id_var.set(rid)
        request.state.request_id = rid
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers[REQUEST_ID_HEADER] = rid
        return response
