from decimal import Decimal

from sqlalchemy import DECIMAL, CheckConstraint, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import CatalogServiceBaseModel

NAME_MAX_LENGTH = 200
IMAGE_URL_MAX_LENGTH = 500
DESCRIPTION_MAX_LENGTH = 2000


class Product(CatalogServiceBaseModel):
    __tablename__ = "products"

    # id, created_at, updated_at are inherited from the base model
    name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False)
    image_url: Mapped[str] = mapped_column(String(IMAGE_URL_MAX_LENGTH), nullable=False)
    price: Mapped[Decimal | None] = mapped_column(DECIMAL(18, 2), nullable=True)
    description: Mapped[str | None] = mapped_column(
        String(DESCRIPTION_MAX_LENGTH), nullable=True
    )
    quantity: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_products_quantity_non_negative"),
    )

    def __repr__(self) -> str:
        return f"Product(id={self.id!r}, name={self.name!r}, quantity={self.quantity!r})"
