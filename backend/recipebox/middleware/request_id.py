"""
RecipeBox Backend: Request ID Middleware
==========================================

What:  Gives every request a short correlation id and echoes it in the
       X-Request-ID response header.
How:   A client-supplied X-Request-ID is reused only if it is a short token
       of safe characters; anything else (log-injection attempts, huge
       headers) is replaced by a fresh id. The id lives in a ContextVar for
       loggers and exception handlers and on request.state for handlers.
"""

import re
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

_CLIENT_ID_RE = re.compile(r"^[A-Za-z0-9._-]{1,64}$")

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def new_request_id() -> str:
    return uuid.uuid4().hex[:8]


def accept_request_id(value: str | None) -> str:
    """Client id when it is safe to log verbatim, otherwise a new one."""
    if value and _CLIENT_ID_RE.match(value):
        return value
    return new_request_id()


class RequestIDMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = accept_request_id(request.headers.get(REQUEST_ID_HEADER))
        request_id_var.set(request_id)
        request.state.request_id = request_id

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
