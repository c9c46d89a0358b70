"""Catalog Service domain exceptions"""

from typing import List, Optional


class CatalogError(Exception):
    """Base class for Catalog Service errors"""


class ProductValidationError(CatalogError, ValueError):
    """Raised when product input breaks a business rule (empty name, negative stock...)"""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field

    @property
    def errors(self) -> List[str]:
        if self.field:
            return [f"{self.field}: {self.message}"]
        return [self.message]


class CatalogPersistenceError(CatalogError):
    """Raised when the product store cannot complete an operation"""

    def __init__(self, operation: str, message: str = "Product store operation failed"):
        super().__init__(f"{message} ({operation})")
        self.operation = operation
