"""
Error handling for the Catalog Service.
Every failure leaves the service in the same envelope as successful responses:
{"success": false, "data": null, "message": ..., "errors": [...]}.
"""

from typing import Any, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ...core.exceptions import CatalogPersistenceError, ProductValidationError
from ...schemas.common import ApiResponse
from ...utils.logging import setup_catalog_logging

logger = setup_catalog_logging("catalog_service.error_handler")


class CatalogServiceErrorHandler:
    """
    Centralized error handling for the Catalog Service.

    - ProductValidationError and request validation errors -> 400
    - HTTPException -> its own status code
    - CatalogPersistenceError and anything unexpected -> 500, generic message
    """

    @staticmethod
    def setup_error_handlers(app: FastAPI) -> None:
        @app.exception_handler(StarletteHTTPException)
        async def http_exception_handler(
            request: Request, exc: StarletteHTTPException
        ) -> JSONResponse:
            return CatalogServiceErrorHandler._create_error_response(
                request=request,
                status_code=exc.status_code,
                message=str(exc.detail),
            )

        @app.exception_handler(RequestValidationError)
        async def validation_exception_handler(
            request: Request, exc: RequestValidationError
        ) -> JSONResponse:
            errors: List[str] = []
            for error in exc.errors():
                location = [str(loc) for loc in error["loc"] if loc != "body"]
                field = ".".join(location)
                errors.append(f"{field}: {error['msg']}" if field else error["msg"])

            return CatalogServiceErrorHandler._create_error_response(
                request=request,
                status_code=400,
                message="Invalid input",
                errors=errors,
            )

        @app.exception_handler(ProductValidationError)
        async def product_validation_error_handler(
            request: Request, exc: ProductValidationError
        ) -> JSONResponse:
            return CatalogServiceErrorHandler._create_error_response(
                request=request,
                status_code=400,
                message=exc.message,
                errors=exc.errors,
            )

        @app.exception_handler(CatalogPersistenceError)
        async def persistence_error_handler(
            request: Request, exc: CatalogPersistenceError
        ) -> JSONResponse:
            logger.error(
                "Product store failure",
                extra={
                    "correlation_id": getattr(request.state, "correlation_id", None),
                    "path": request.url.path,
                    "method": request.method,
                    "operation": exc.operation,
                },
            )
            return CatalogServiceErrorHandler._create_error_response(
                request=request,
                status_code=500,
                message="An error occurred while processing your request",
            )

        @app.exception_handler(Exception)
        async def unhandled_exception_handler(
            request: Request, exc: Exception
        ) -> JSONResponse:
            logger.error(
                "Unhandled exception occurred",
                extra={
                    "correlation_id": getattr(request.state, "correlation_id", None),
                    "path": request.url.path,
                    "method": request.method,
                    "exception_type": type(exc).__name__,
                },
                exc_info=exc,
            )
            return CatalogServiceErrorHandler._create_error_response(
                request=request,
                status_code=500,
                message="An error occurred while processing your request",
            )

    @staticmethod
    def _create_error_response(
        request: Request,
        status_code: int,
        message: str,
        errors: Optional[List[str]] = None,
    ) -> JSONResponse:
        if status_code < 500:
            logger.warning(
                "Client error",
                extra={
                    "correlation_id": getattr(request.state, "correlation_id", None),
                    "status_code": status_code,
                    "path": request.url.path,
                    "method": request.method,
                    "error": message,
                },
            )

        body = ApiResponse[Any].error_response(message, errors)
        return JSONResponse(status_code=status_code, content=body.model_dump())


def setup_catalog_error_handling(app: FastAPI) -> None:
    """Register the Catalog Service exception handlers on an application"""
    CatalogServiceErrorHandler.setup_error_handlers(app)
    logger.info("Catalog Service error handling configured")
