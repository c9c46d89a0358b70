"""Initial migration: products table and sample catalog

Revision ID: 001_initial
Revises:
Create Date: 2025-10-21 12:43:45.000000

"""

from datetime import datetime
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    products = op.create_table(
        "products",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("image_url", sa.String(length=500), nullable=False),
        sa.Column("price", sa.DECIMAL(precision=18, scale=2), nullable=True),
        sa.Column("description", sa.String(length=2000), nullable=True),
        sa.Column("quantity", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=False), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=False), nullable=False),
        sa.CheckConstraint("quantity >= 0", name="ck_products_quantity_non_negative"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_products_created_at", "products", ["created_at"])

    # Sample catalog
    op.bulk_insert(
        products,
        [
            {
                "id": 1,
                "name": "Gaming Laptop Pro X15",
                "image_url": "https://images.unsplash.com/photo-1603302576837-37561b2e2302",
                "price": 34999.99,
                "description": "High-performance gaming laptop with RTX 4070, 32GB RAM, and 1TB SSD",
                "quantity": 15,
                "created_at": datetime(2025, 9, 21, 14, 0, 0),
                "updated_at": datetime(2025, 9, 21, 14, 0, 0),
            },
            {
                "id": 2,
                "name": "Wireless Bluetooth Headphones",
                "image_url": "https://images.unsplash.com/photo-1505740420928-5e560c06d30e",
                "price": 2499.00,
                "description": "Premium noise-cancelling headphones with 30-hour battery life",
                "quantity": 45,
                "created_at": datetime(2025, 9, 26, 14, 0, 0),
                "updated_at": datetime(2025, 9, 26, 14, 0, 0),
            },
            {
                "id": 3,
                "name": '4K Ultra HD Monitor 32"',
                "image_url": "https://images.unsplash.com/photo-1527443224154-c4a3942d3acf",
                "price": 12999.00,
                "description": "Professional 4K monitor with HDR support and 144Hz refresh rate",
                "quantity": 8,
                "created_at": datetime(2025, 10, 1, 14, 0, 0),
                "updated_at": datetime(2025, 10, 1, 14, 0, 0),
            },
            {
                "id": 4,
                "name": "Mechanical Gaming Keyboard RGB",
                "image_url": "https://images.unsplash.com/photo-1587829741301-dc798b83add3",
                "price": 3299.00,
                "description": "RGB mechanical keyboard with Cherry MX switches",
                "quantity": 32,
                "created_at": datetime(2025, 10, 6, 14, 0, 0),
                "updated_at": datetime(2025, 10, 6, 14, 0, 0),
            },
            {
                "id": 5,
                "name": "Smartphone Pro Max 256GB",
                "image_url": "https://images.unsplash.com/photo-1511707171634-5f897ff02aa9",
                "price": 28999.00,
                "description": "Latest flagship smartphone with advanced camera system",
                "quantity": 22,
                "created_at": datetime(2025, 10, 11, 14, 0, 0),
                "updated_at": datetime(2025, 10, 11, 14, 0, 0),
            },
        ],
    )


def downgrade() -> None:
    op.drop_index("ix_products_created_at", table_name="products")
    op.drop_table("products")
