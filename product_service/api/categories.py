from fastapi import APIRouter, Depends

from product_service.database import get_catalog
from product_service.schemas.product import CategoryListResponse
from product_service.services.catalog_store import CatalogStore
from product_service.services.product_service import ProductService

router = APIRouter(prefix="/categories", tags=["Categories"])


@router.get(
    "",
    response_model=CategoryListResponse,
    summary="List categories",
    description="Distinct product categories, sorted alphabetically."
)
def list_categories(catalog: CatalogStore = Depends(get_catalog)):
    """Get the categories currently in use."""
    service = ProductService(catalog)
    categories = service.categories()
    return CategoryListResponse(total_categories=len(categories), categories=categories)
