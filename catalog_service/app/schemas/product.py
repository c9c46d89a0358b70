from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import (
    AnyHttpUrl,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    field_serializer,
    field_validator,
)
from pydantic.alias_generators import to_camel

from ..models.product import (
    DESCRIPTION_MAX_LENGTH,
    IMAGE_URL_MAX_LENGTH,
    NAME_MAX_LENGTH,
)

_url_adapter = TypeAdapter(AnyHttpUrl)


class CamelModel(BaseModel):
    """Base for API models: snake_case attributes, camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProductCreate(CamelModel):
    # Length limits apply to the trimmed values, see the validators below
    name: str = Field(..., description="Product name (required)")
    image_url: str = Field(..., description="Product image URL (required)")
    price: Optional[Decimal] = Field(
        None, ge=0, description="Product price (must be non-negative if provided)"
    )
    description: Optional[str] = Field(None, max_length=DESCRIPTION_MAX_LENGTH)
    quantity: Optional[int] = Field(
        None, ge=0, description="Initial stock (must be non-negative if provided)"
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError("Product name is required")
        v = v.strip()
        if len(v) > NAME_MAX_LENGTH:
            raise ValueError(
                f"Product name cannot exceed {NAME_MAX_LENGTH} characters"
            )
        return v

    @field_validator("image_url")
    @classmethod
    def validate_image_url(cls, v):
        if not v or not v.strip():
            raise ValueError("Image URL is required")
        v = v.strip()
        if len(v) > IMAGE_URL_MAX_LENGTH:
            raise ValueError(
                f"Image URL cannot exceed {IMAGE_URL_MAX_LENGTH} characters"
            )
        try:
            _url_adapter.validate_python(v)
        except ValueError:
            raise ValueError("Invalid URL format")
        return v


class ProductStockUpdate(CamelModel):
    quantity: int = Field(..., ge=0, description="New absolute stock level")


class ProductResponse(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )

    id: int
    name: str
    image_url: str
    price: Optional[Decimal] = None
    description: Optional[str] = None
    quantity: int
    created_at: datetime
    updated_at: datetime

    @field_serializer("price")
    def serialize_price(self, price: Optional[Decimal]) -> Optional[float]:
        return float(price) if price is not None else None


class StockUpdateResult(CamelModel):
    product_id: int
    quantity: int


class StockUpdateAccepted(CamelModel):
    product_id: int
    quantity: int
    status: str = "queued"
    queue_position: int
    message: str = "Stock update will be processed asynchronously within a few seconds"
