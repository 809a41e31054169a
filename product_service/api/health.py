from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from product_service.config import get_settings
from product_service.database import get_catalog
from product_service.services.catalog_store import CatalogStore

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_class=PlainTextResponse,
    summary="Health check",
    description="Basic liveness probe."
)
def health_check():
    """Simple health check."""
    return "OK"


@router.get(
    "/healthy",
    summary="Detailed health check",
    description="Service status with version and catalog size."
)
def detailed_health_check(catalog: CatalogStore = Depends(get_catalog)):
    """
    Health check with service details.

    Returns the service name and version, the current time and how many
    products the catalog holds.
    """
    settings = get_settings()
    return {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "totalProducts": len(catalog),
    }
