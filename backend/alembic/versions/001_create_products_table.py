"""Create products table

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates the `products` table backing the product store.

Rollback: downgrade() drops the table entirely (destructive, all data lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the products table. See app/models/product.py for field docs."""
    op.create_table(
        "products",

        # Primary Key: generated by the database, never changed
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),

        sa.Column("name", sa.String(100), nullable=False),

        # Always > 0; enforced by request validation, not by the schema
        sa.Column("price", sa.Float(), nullable=False),

        # New products start available
        sa.Column(
            "availability",
            sa.Boolean(),
            nullable=False,
            server_default=sa.true(),
        ),

        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    """
    Drop the products table entirely.

    WARNING: This is destructive; all product data will be permanently lost.
    """
    op.drop_table("products")
