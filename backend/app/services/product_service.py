"""
Product API Backend: Product Service (Product Store Handlers)
==============================================================

What:  Create/read/update/delete operations on the products table.
Who:   Called by the handlers bound in the route table (routes/products.py).
When:  Only after a request passed the origin gate and its field validators,
       so every argument here is already typed and well-formed.

Error Handling Strategy:
    - Missing rows raise NotFoundError (→ 404)
    - Our own exceptions propagate unchanged
    - Anything else from the driver is logged and wrapped in DatabaseError
      (→ 500, generic message to the client)

Design Decision:
    ProductService is stateless; it receives the session for each call, so
    every request works in its own transaction (see get_db_session).
"""

import logging
from functools import wraps
from typing import Awaitable, Callable, List, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import DatabaseError, NotFoundError, ProductAPIError
from app.models.product import PRODUCT_ID_MAX, PRODUCT_ID_MIN, Product
from app.schemas.product import ProductCreate, ProductResponse, ProductUpdate

logger = logging.getLogger(__name__)

T = TypeVar("T")

DELETED_MESSAGE = "Product deleted"


def _wrap_database_errors(operation: str) -> Callable:
    """
    Decorator translating unexpected exceptions into DatabaseError.

    `operation` completes the client message: "Could not <operation>."
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @wraps(func)
        async def wrapper(*args, **kwargs) -> T:
            try:
                return await func(*args, **kwargs)
            except ProductAPIError:
                raise
            except Exception as e:
                logger.error("Database error during %s: %s", operation, str(e), exc_info=True)
                raise DatabaseError(
                    message=f"Could not {operation}. Please try again.",
                    context={"error_type": type(e).__name__},
                )

        return wrapper

    return decorator


class ProductService:
    """
    Business logic layer for product records.

    Responsibilities:
        - list_products():        all products, ordered by id
        - get_product():          single product or NotFoundError
        - create_product():       insert, availability starts true
        - update_product():       replace name, price, availability
        - toggle_availability():  flip availability, leave the rest alone
        - delete_product():       remove and return a confirmation string
    """

    async def _get_or_404(self, db: AsyncSession, product_id: int) -> Product:
        # Well-formed but unstorable ids cannot match a row; drivers reject them
        if not PRODUCT_ID_MIN <= product_id <= PRODUCT_ID_MAX:
            raise NotFoundError(resource="product", resource_id=str(product_id))
        result = await db.execute(select(Product).where(Product.id == product_id))
        product = result.scalar_one_or_none()
        if product is None:
            raise NotFoundError(resource="product", resource_id=str(product_id))
        return product

    @_wrap_database_errors("retrieve products")
    async def list_products(self, db: AsyncSession) -> List[ProductResponse]:
        result = await db.execute(select(Product).order_by(Product.id))
        return [ProductResponse.model_validate(p) for p in result.scalars().all()]

    @_wrap_database_errors("retrieve the product")
    async def get_product(self, db: AsyncSession, product_id: int) -> ProductResponse:
        product = await self._get_or_404(db, product_id)
        return ProductResponse.model_validate(product)

    @_wrap_database_errors("create the product")
    async def create_product(
        self, db: AsyncSession, payload: ProductCreate
    ) -> ProductResponse:
        """
        Insert a new product.

        flush() assigns the generated id without committing; the commit
        happens in get_db_session once the response is ready.
        """
        product = Product(name=payload.name, price=payload.price, availability=True)
        db.add(product)
        await db.flush()
        logger.info("Product created: %s", product.id)
        return ProductResponse.model_validate(product)

    @_wrap_database_errors("update the product")
    async def update_product(
        self, db: AsyncSession, product_id: int, payload: ProductUpdate
    ) -> ProductResponse:
        product = await self._get_or_404(db, product_id)
        product.name = payload.name
        product.price = payload.price
        product.availability = payload.availability
        await db.flush()
        logger.info("Product updated: %s", product_id)
        return ProductResponse.model_validate(product)

    @_wrap_database_errors("update the product availability")
    async def toggle_availability(
        self, db: AsyncSession, product_id: int
    ) -> ProductResponse:
        product = await self._get_or_404(db, product_id)
        product.availability = not product.availability
        await db.flush()
        logger.info("Product %s availability set to %s", product_id, product.availability)
        return ProductResponse.model_validate(product)

    @_wrap_database_errors("delete the product")
    async def delete_product(self, db: AsyncSession, product_id: int) -> str:
        product = await self._get_or_404(db, product_id)
        await db.delete(product)
        await db.flush()
        logger.info("Product deleted: %s", product_id)
        return DELETED_MESSAGE


# Stateless; one shared instance
product_service = ProductService()
