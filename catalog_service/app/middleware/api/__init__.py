from .versioning import APIVersion, APIVersioningMiddleware, get_api_version

__all__ = ["APIVersion", "APIVersioningMiddleware", "get_api_version"]
