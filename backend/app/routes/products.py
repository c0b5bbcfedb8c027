"""
Product API Backend: Product Route Table
=========================================

What:  The six product routes, each declared once as a RouteDefinition with
       its validators, its handler and its documentation metadata.
Who:   main.create_app() registers PRODUCT_ROUTES on `router` and builds the
       OpenAPI document from the same tuple.

Route Inventory (mounted under /api/products):
    GET     ""        list products                       200
    GET     "/{id}"   get one product                     200 / 400 / 404
    POST    ""        create a product                    201 / 400
    PUT     "/{id}"   replace name, price, availability   200 / 400 / 404
    PATCH   "/{id}"   toggle availability                 200 / 400 / 404
    DELETE  "/{id}"   delete a product                    200 / 400 / 404

Handlers are thin: they receive typed, validated values and delegate to
ProductService.
"""

from typing import List

from fastapi import APIRouter
from sqlalchemy.ext.asyncio import AsyncSession

from app.openapi import ParamDoc, ResponseDoc, RouteDoc, schema_ref
from app.routes.registry import RouteDefinition, register_routes
from app.schemas.product import ProductCreate, ProductResponse, ProductUpdate
from app.services.product_service import product_service
from app.validation import PRODUCT_AVAILABILITY, PRODUCT_ID, PRODUCT_NAME, PRODUCT_PRICE


PREFIX = "/api/products"

router = APIRouter(prefix=PREFIX)


# ══════════════════════════════════════════════════════════════════════════
# Documentation Schemas
# ══════════════════════════════════════════════════════════════════════════

PRODUCT_SCHEMA = {
    "type": "object",
    "properties": {
        "id": {"type": "integer", "description": "The product Id", "example": 1},
        "name": {
            "type": "string",
            "description": "The product name",
            "example": "Curved monitor 32 inches",
        },
        "price": {"type": "number", "description": "The product price", "example": 300},
        "availability": {
            "type": "boolean",
            "description": "The product availability",
            "example": True,
        },
    },
}

PRODUCTS_TAG = {"name": "Products", "description": "API operations related to products"}

_NEW_PRODUCT_BODY = {
    "type": "object",
    "required": ["name", "price"],
    "properties": {
        "name": {"type": "string", "example": "Curved monitor 49 inches"},
        "price": {"type": "number", "example": 399},
    },
}

_UPDATE_PRODUCT_BODY = {
    "type": "object",
    "required": ["name", "price", "availability"],
    "properties": {
        "name": {"type": "string", "example": "Curved monitor 49 inches"},
        "price": {"type": "number", "example": 399},
        "availability": {"type": "boolean", "example": True},
    },
}

_PRODUCT = schema_ref("Product")


def _id_param(action: str) -> ParamDoc:
    return ParamDoc(name="id", description=f"The Id of the product to {action}")


# ══════════════════════════════════════════════════════════════════════════
# Handlers
# ══════════════════════════════════════════════════════════════════════════


async def list_products(db: AsyncSession) -> List[ProductResponse]:
    return await product_service.list_products(db)


async def get_product(db: AsyncSession, product_id: int) -> ProductResponse:
    return await product_service.get_product(db, product_id)


async def create_product(db: AsyncSession, payload: ProductCreate) -> ProductResponse:
    return await product_service.create_product(db, payload)


async def update_product(
    db: AsyncSession, product_id: int, payload: ProductUpdate
) -> ProductResponse:
    return await product_service.update_product(db, product_id, payload)


async def update_availability(db: AsyncSession, product_id: int) -> ProductResponse:
    return await product_service.toggle_availability(db, product_id)


async def delete_product(db: AsyncSession, product_id: int) -> str:
    return await product_service.delete_product(db, product_id)


# ══════════════════════════════════════════════════════════════════════════
# Route Table
# ══════════════════════════════════════════════════════════════════════════

PRODUCT_ROUTES = (
    RouteDefinition(
        method="GET",
        path="",
        name="get_products",
        handler=list_products,
        doc=RouteDoc(
            summary="Get a list of products",
            description="Return a list of products",
            responses={
                200: ResponseDoc(
                    "Successful response", {"type": "array", "items": _PRODUCT}
                ),
            },
        ),
    ),
    RouteDefinition(
        method="GET",
        path="/{id}",
        name="get_product_by_id",
        handler=get_product,
        validators=(PRODUCT_ID,),
        doc=RouteDoc(
            summary="Get a product by Id",
            description="Return a product based on its unique Id",
            parameters=(_id_param("retrieve"),),
            responses={
                200: ResponseDoc("Successful response", _PRODUCT),
                400: ResponseDoc("Bad Request - Invalid Id"),
                404: ResponseDoc("Not found"),
            },
        ),
    ),
    RouteDefinition(
        method="POST",
        path="",
        name="create_product",
        handler=create_product,
        validators=(PRODUCT_NAME, PRODUCT_PRICE),
        body_model=ProductCreate,
        status_code=201,
        doc=RouteDoc(
            summary="Create a new product",
            description="Returns a new record in the database",
            request_body=_NEW_PRODUCT_BODY,
            responses={
                201: ResponseDoc("Successful response", _PRODUCT),
                400: ResponseDoc("Bad Request - Invalid input data"),
            },
        ),
    ),
    RouteDefinition(
        method="PUT",
        path="/{id}",
        name="update_product",
        handler=update_product,
        validators=(PRODUCT_ID, PRODUCT_NAME, PRODUCT_PRICE, PRODUCT_AVAILABILITY),
        body_model=ProductUpdate,
        doc=RouteDoc(
            summary="Updates a product with user input",
            description="Returns the updated product",
            parameters=(_id_param("update"),),
            request_body=_UPDATE_PRODUCT_BODY,
            responses={
                200: ResponseDoc("Successful response", _PRODUCT),
                400: ResponseDoc("Bad Request - Invalid Id or invalid input data"),
                404: ResponseDoc("Product not found"),
            },
        ),
    ),
    RouteDefinition(
        method="PATCH",
        path="/{id}",
        name="update_availability",
        handler=update_availability,
        validators=(PRODUCT_ID,),
        doc=RouteDoc(
            summary="Update product availability",
            description="Toggles the availability and returns the updated product",
            parameters=(_id_param("update"),),
            responses={
                200: ResponseDoc("Successful response", _PRODUCT),
                400: ResponseDoc("Bad Request - Invalid Id"),
                404: ResponseDoc("Product not found"),
            },
        ),
    ),
    RouteDefinition(
        method="DELETE",
        path="/{id}",
        name="delete_product",
        handler=delete_product,
        validators=(PRODUCT_ID,),
        doc=RouteDoc(
            summary="Deletes a product by a given Id",
            description="Returns a confirmation message",
            parameters=(_id_param("delete"),),
            responses={
                200: ResponseDoc(
                    "Successful response",
                    {"type": "string", "example": "Product deleted"},
                ),
                400: ResponseDoc("Bad Request - Invalid Id"),
                404: ResponseDoc("Product not found"),
            },
        ),
    ),
)

register_routes(router, PRODUCT_ROUTES)
