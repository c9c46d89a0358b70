from .error_handler import CatalogServiceErrorHandler, setup_catalog_error_handling

__all__ = ["CatalogServiceErrorHandler", "setup_catalog_error_handling"]
