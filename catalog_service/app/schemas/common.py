from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Uniform response envelope for every endpoint"""

    success: bool
    data: Optional[T] = None
    message: Optional[str] = None
    errors: Optional[List[str]] = None

    @classmethod
    def success_response(
        cls, data: T, message: Optional[str] = None
    ) -> "ApiResponse[T]":
        return cls(success=True, data=data, message=message)

    @classmethod
    def error_response(
        cls, message: str, errors: Optional[List[str]] = None
    ) -> "ApiResponse[T]":
        return cls(success=False, message=message, errors=errors)


class PagedResult(BaseModel, Generic[T]):
    """A window over an ordered collection plus metadata about the whole"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    items: List[T] = Field(default_factory=list)
    page_number: int
    page_size: int
    total_count: int
    total_pages: int

    @computed_field(alias="hasPreviousPage")  # type: ignore[prop-decorator]
    @property
    def has_previous_page(self) -> bool:
        return self.page_number > 1

    @computed_field(alias="hasNextPage")  # type: ignore[prop-decorator]
    @property
    def has_next_page(self) -> bool:
        return self.page_number < self.total_pages
