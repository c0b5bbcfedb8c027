"""
Product API Backend: Origin Gate Middleware
============================================

What:  Single-origin admission check applied to every inbound request.
Why:   The API is consumed by one frontend; any other browser origin must be
       refused before body parsing, routing or any handler runs.
How:   Compares the Origin header with the configured FRONTEND_URL by exact
       string match and answers refused requests with 403. Admitted requests
       continue to Starlette's CORSMiddleware, which answers preflights and
       adds the cross-origin response headers.
When:  After RequestIDMiddleware and RequestLoggingMiddleware, so refusals are
       still logged with a request ID.

Decision Table:
    Origin header        FRONTEND_URL        Result
    ─────────────────    ────────────────    ──────────────────────────
    absent / empty       anything            admitted (same-origin, curl)
    == FRONTEND_URL      set                 admitted, CORS headers added
    anything else        set or unset        403 cors_error
"""

import logging
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from app.exceptions import OriginNotAllowedError
from app.middleware.request_id import request_id_var
from app.schemas.product import ErrorResponse

logger = logging.getLogger(__name__)


def is_origin_allowed(origin: Optional[str], allowed_origin: Optional[str]) -> bool:
    """
    Pure admission predicate.

    Requests without an Origin header (or with an empty one) are same-origin
    or non-browser calls and are always admitted. Otherwise the origin must
    equal the configured one exactly; an unset configuration admits no
    cross-origin caller.
    """
    if not origin:
        return True
    return bool(allowed_origin) and origin == allowed_origin


class OriginGateMiddleware(BaseHTTPMiddleware):
    """
    Refuses requests from any origin other than the configured one.

    A refused request gets a 403 JSON error and the downstream app (CORS
    headers, routing, validation) is never called. Admitted requests pass
    through untouched. The allowed origin is fixed at construction.
    """

    def __init__(self, app: ASGIApp, allowed_origin: str = "") -> None:
        super().__init__(app)
        self.allowed_origin = allowed_origin

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        origin = request.headers.get("origin")
        if not is_origin_allowed(origin, self.allowed_origin):
            return self._reject(OriginNotAllowedError(origin=origin))
        return await call_next(request)

    def _reject(self, exc: OriginNotAllowedError) -> Response:
        rid = request_id_var.get("")
        logger.warning("[%s] Origin rejected: %s", rid, exc.origin)
        body = ErrorResponse(error="cors_error", message=exc.message, request_id=rid)
        return JSONResponse(status_code=403, content=body.model_dump())
