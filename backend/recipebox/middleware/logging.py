"""
RecipeBox Backend: Access Log Middleware
==========================================

What:  One access-log line per HTTP request on the `recipebox.access` logger.
How:   Times the downstream app, then logs method, path, status, duration,
       request id and the caller: the authenticated user id when the
       authorization gate ran (recipe routes), else the client address.

Example:
    GET /recipes/3 404 2.4ms [1f0c9a2b] user=7
    POST /signup 201 61.0ms [a81d3e40] from 127.0.0.1

5xx lines are ERROR, 4xx WARNING, the rest INFO. Bodies and the
Authorization header are never logged.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("recipebox.access")


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


def describe_caller(request: Request) -> str:
    # user_id is set on request.state by dependencies.get_current_user_id
    user_id = getattr(request.state, "user_id", None)
    if user_id is not None:
        return f"user={user_id}"
    return f"from {request.client.host if request.client else 'unknown'}"


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        logger.log(
            level_for_status(response.status_code),
            "%s %s %d %.1fms [%s] %s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            getattr(request.state, "request_id", ""),
            describe_caller(request),
        )
        return response
