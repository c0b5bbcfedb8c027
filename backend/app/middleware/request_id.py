"""
Product API Backend: Request ID Middleware
===========================================

What:  Assigns a short correlation ID to each request and returns it in the
       X-Request-ID response header.
Why:   Every log line and every error body of a request carries the same ID,
       so a frontend bug report can be matched to server logs.
When:  Outermost middleware; runs before logging and the origin gate.

A client-supplied X-Request-ID is reused only when it is a short token of
letters, digits, '.', '_' or '-'. Anything else is replaced, since the value
is written verbatim into log lines and JSON error bodies.
"""

import re
import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

_CLIENT_ID_RE = re.compile(r"^[A-Za-z0-9._-]{1,64}$")

# Coroutine-local: concurrent requests on one event loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def new_request_id() -> str:
    return uuid.uuid4().hex[:8]


def resolve_request_id(client_value: Optional[str]) -> str:
    """The client's ID when it is a safe token, otherwise a fresh one."""
    if client_value and _CLIENT_ID_RE.match(client_value):
        return client_value
    return new_request_id()


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Resolves the request ID, publishes it in request_id_var (read by
    loggers, error handlers and the origin gate) and echoes it back.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request_id_var.set(rid)
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = rid
        return response
