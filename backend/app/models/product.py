"""
Product API Backend: Product SQLAlchemy Model
==============================================

What:  ORM model representing the `products` table.
How:   Inherits from the shared DeclarativeBase; Alembic reads this for migrations.
Who:   Used by ProductService for CRUD operations.

Table Design:
    - id: integer primary key generated by the database, never changed
    - name: required, at most 100 characters
    - price: required, always > 0 (enforced by request validation)
    - availability: defaults to true when a product is created
"""

from sqlalchemy import Boolean, Float, Integer, String, true
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base

# Range of the `id` column (SQL INTEGER is signed 32-bit on PostgreSQL)
PRODUCT_ID_MIN = -(2 ** 31)
PRODUCT_ID_MAX = 2 ** 31 - 1


class Product(Base):
    """
    A product record as stored by the product store.

    Lifecycle:
        1. Created by POST /api/products (availability = True)
        2. Replaced by PUT, availability flipped by PATCH
        3. Removed by DELETE
    """

    __tablename__ = "products"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )

    price: Mapped[float] = mapped_column(
        Float,
        nullable=False,
    )

    availability: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=true(),
    )

    def __repr__(self) -> str:
        """Developer-friendly string representation for debugging."""
        return (
            f"<Product(id={self.id}, name='{self.name}', "
            f"price={self.price}, availability={self.availability})>"
        )
