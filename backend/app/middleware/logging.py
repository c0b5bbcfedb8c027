"""
Product API Backend: Request Logging Middleware
================================================

What:  One structured log line per HTTP request, written on completion.
How:   Measures wall time around the downstream app and logs method, path,
       status, duration, request ID and client IP.
When:  After RequestIDMiddleware (uses request ID for correlation), before
       the origin gate, so refused origins are logged as 403s.

Log line:
    GET /api/products/abc 400 1.8ms [a1b2c3d4] from 127.0.0.1

Request bodies are never logged.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.middleware.request_id import request_id_var

logger = logging.getLogger("products.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs each request at a level chosen from its response status:
        5xx → ERROR, 4xx → WARNING, everything else → INFO
    Health checks are skipped; probes hit them every few seconds.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start_time = time.perf_counter()

        # request.client may be None in testing
        client_ip = getattr(request.client, "host", "unknown") if request.client else "unknown"
        method = request.method
        path = request.url.path
        rid = request_id_var.get("")

        if path == "/health":
            return await call_next(request)

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000

        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s",
            method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )

        return response
