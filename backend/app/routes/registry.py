"""
Product API Backend: Route Definitions and Dispatcher
======================================================

What:  The RouteDefinition record and the code that turns a table of them
       into FastAPI routes.
Why:   One static record per (method, path) pair carries everything about a
       route: its validators, its handler and its documentation. The
       dispatcher reads the first two, openapi.py reads the last.
How:   register_routes() adds one endpoint per definition to an APIRouter.
       Each endpoint runs the same pipeline:

           read JSON body
             → run the route's field validators (all of them, in order)
             → any error?  raise ValidationError  (→ 400, handler not called)
             → otherwise:  build typed body, await handler exactly once
             → serialize the handler's result with the route's status code

FastAPI's own request validation and schema inference are bypassed on
purpose: endpoints take the raw Request, and routes are registered with
include_in_schema=False because the published document is built from the
same table by openapi.build_openapi_document().
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Iterable, Mapping, Optional, Tuple, Type

from fastapi import APIRouter, Depends, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.exceptions import ValidationError
from app.openapi import RouteDoc
from app.validation import FieldValidator, run_validators

logger = logging.getLogger(__name__)

Handler = Callable[..., Awaitable[Any]]


@dataclass(frozen=True)
class RouteDefinition:
    """
    Static binding of an HTTP method and path to a validation pipeline and
    a handler. Built at import time, never mutated afterwards.

    Attributes:
        method:       GET, POST, PUT, PATCH or DELETE
        path:         Path template relative to the router prefix, e.g. "/{id}"
        name:         Endpoint name, also the OpenAPI operationId
        handler:      async callable(db, **typed_path_values[, payload=model])
        doc:          Documentation metadata (no effect on runtime behavior)
        validators:   Field validators, run in this order
        body_model:   Pydantic model built from validated body values
        status_code:  Status of a successful response
    """
    method: str
    path: str
    name: str
    handler: Handler
    doc: RouteDoc
    validators: Tuple[FieldValidator, ...] = ()
    body_model: Optional[Type[BaseModel]] = None
    status_code: int = 200


async def read_json_body(request: Request) -> Mapping[str, Any]:
    """
    Deserialize the request body for field lookup.

    Non-JSON content types and empty bodies read as {}. A JSON value that is
    not an object also reads as {}, so its fields are reported as missing.
    """
    content_type = request.headers.get("content-type", "")
    if "json" not in content_type:
        return {}
    if not (await request.body()).strip():
        return {}
    try:
        data = await request.json()
    except ValueError:
        raise ValidationError({"body": ["malformed JSON body"]})
    return data if isinstance(data, dict) else {}


def build_endpoint(route: RouteDefinition) -> Callable[..., Awaitable[JSONResponse]]:
    """Creates the pipeline endpoint for one route definition."""

    async def endpoint(
        request: Request,
        db: AsyncSession = Depends(get_db_session),
    ) -> JSONResponse:
        body = await read_json_body(request)
        outcome = run_validators(route.validators, request.path_params, body)
        if not outcome.ok:
            raise ValidationError(outcome.errors)

        kwargs: Dict[str, Any] = dict(outcome.path)
        if route.body_model is not None:
            kwargs["payload"] = route.body_model(**outcome.body)

        result = await route.handler(db, **kwargs)
        return JSONResponse(status_code=route.status_code, content=jsonable_encoder(result))

    endpoint.__name__ = route.name
    return endpoint


def register_routes(router: APIRouter, routes: Iterable[RouteDefinition]) -> None:
    """
    Adds every route definition to the router, in table order.

    Path templates in this API never overlap, so the first match Starlette
    finds is also the only match.
    """
    for route in routes:
        router.add_api_route(
            route.path,
            build_endpoint(route),
            methods=[route.method],
            name=route.name,
            status_code=route.status_code,
            include_in_schema=False,
        )
        logger.debug("Registered %s %s%s", route.method, router.prefix, route.path)
