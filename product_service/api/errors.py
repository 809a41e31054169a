import logging

from fastapi import FastAPI, Request, status
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from product_service.services.exceptions import (
    CatalogError,
    InsufficientStockError,
    InvalidIdentifierError,
    InvalidOperationError,
    NameConflictError,
    ProductNotFoundError,
    ValidationFailedError,
)

logger = logging.getLogger(__name__)

STATUS_CODES = {
    ValidationFailedError: status.HTTP_400_BAD_REQUEST,
    InvalidOperationError: status.HTTP_400_BAD_REQUEST,
    InvalidIdentifierError: status.HTTP_400_BAD_REQUEST,
    InsufficientStockError: status.HTTP_400_BAD_REQUEST,
    ProductNotFoundError: status.HTTP_404_NOT_FOUND,
    NameConflictError: status.HTTP_409_CONFLICT,
}

AVAILABLE_ENDPOINTS = [
    "GET    /health",
    "GET    /healthy",
    "GET    /products",
    "GET    /products/:id",
    "POST   /products",
    "PUT    /products/:id",
    "PATCH  /products/:id",
    "DELETE /products/:id",
    "POST   /products/:id/stock",
    "GET    /categories",
]


async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
    """Translate a catalog failure into a JSON error response."""
    status_code = STATUS_CODES.get(type(exc), status.HTTP_400_BAD_REQUEST)
    body = {"error": str(exc)}
    if isinstance(exc, ValidationFailedError):
        body["details"] = exc.violations
    return JSONResponse(status_code=status_code, content=body)


async def not_found_handler(request: Request, exc: StarletteHTTPException):
    """List the available endpoints when a route doesn't exist."""
    if exc.status_code != status.HTTP_404_NOT_FOUND:
        return await http_exception_handler(request, exc)
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"error": "Endpoint not found", "availableEndpoints": AVAILABLE_ENDPOINTS},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Something went wrong!"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CatalogError, catalog_error_handler)
    app.add_exception_handler(StarletteHTTPException, not_found_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
