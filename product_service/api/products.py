from fastapi import APIRouter, Body, Depends, Query, status
from typing import Any, Optional

from product_service.database import get_catalog
from product_service.models.product import Product
from product_service.services.catalog_store import CatalogStore
from product_service.services.product_service import (
    ProductService,
    parse_product_id,
    parse_stock_adjustment,
)
from product_service.schemas.product import (
    ProductListResponse,
    ProductMessageResponse,
    ProductQueryParams,
)

router = APIRouter(prefix="/products", tags=["Products"])


@router.get(
    "",
    response_model=ProductListResponse,
    summary="List products",
    description="Filter, search, sort and paginate the catalog."
)
def list_products(
    category: Optional[str] = Query(None, description="Exact category (case-insensitive)"),
    min_price: Optional[str] = Query(None, alias="minPrice", description="Inclusive lower price bound"),
    max_price: Optional[str] = Query(None, alias="maxPrice", description="Inclusive upper price bound"),
    in_stock: Optional[str] = Query(None, alias="inStock", description="'true' or 'false'"),
    search: Optional[str] = Query(None, description="Search in name and description"),
    sort_by: Optional[str] = Query(None, alias="sortBy", description="id, name, price, stock or createdAt"),
    sort_order: Optional[str] = Query(None, alias="sortOrder", description="asc or desc"),
    page: Optional[str] = Query(None, description="Page number"),
    limit: Optional[str] = Query(None, description="Items per page"),
    catalog: CatalogStore = Depends(get_catalog)
):
    """
    Get paginated list of products.

    Invalid numeric filters are ignored and invalid page/limit values fall
    back to their defaults rather than failing the request.
    """
    service = ProductService(catalog)
    params = ProductQueryParams(
        category=category,
        min_price=min_price,
        max_price=max_price,
        in_stock=in_stock,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        limit=limit,
    )
    return service.list_products(params)


@router.get(
    "/{product_id}",
    response_model=Product,
    summary="Get product by ID"
)
def get_product(
    product_id: str,
    catalog: CatalogStore = Depends(get_catalog)
):
    """Get a product by ID."""
    service = ProductService(catalog)
    return service.get(product_id)


@router.post(
    "",
    response_model=ProductMessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new product",
    description="Create a new product with name, category, price, stock and an optional description."
)
def create_product(
    payload: Any = Body(None),
    catalog: CatalogStore = Depends(get_catalog)
):
    """
    Create a new product.

    - **name**: Product name, unique ignoring case (required)
    - **category**: Product category (required)
    - **price**: Product price, must be non-negative (required)
    - **stock**: Initial stock quantity, non-negative integer (required)
    - **description**: Free text (optional)
    """
    service = ProductService(catalog)
    product = service.create(payload)
    return ProductMessageResponse(message="Product created successfully", product=product)


@router.put(
    "/{product_id}",
    response_model=ProductMessageResponse,
    summary="Replace a product",
    description="Full update: name, category, price and stock are required."
)
def replace_product(
    product_id: str,
    payload: Any = Body(None),
    catalog: CatalogStore = Depends(get_catalog)
):
    """Replace a product. Omitting the description keeps the current one."""
    service = ProductService(catalog)
    product = service.replace(product_id, payload)
    return ProductMessageResponse(message="Product updated successfully", product=product)


@router.patch(
    "/{product_id}",
    response_model=ProductMessageResponse,
    summary="Partially update a product",
    description="Only provided fields will be updated."
)
def patch_product(
    product_id: str,
    payload: Any = Body(None),
    catalog: CatalogStore = Depends(get_catalog)
):
    """Partially update a product."""
    service = ProductService(catalog)
    product = service.patch(product_id, payload)
    return ProductMessageResponse(
        message="Product partially updated successfully", product=product
    )


@router.delete(
    "/{product_id}",
    response_model=ProductMessageResponse,
    summary="Delete a product",
    description="Delete a product by ID and return the removed record."
)
def delete_product(
    product_id: str,
    catalog: CatalogStore = Depends(get_catalog)
):
    """Delete a product."""
    service = ProductService(catalog)
    product = service.delete(product_id)
    return ProductMessageResponse(message="Product deleted successfully", product=product)


@router.post(
    "/{product_id}/stock",
    response_model=ProductMessageResponse,
    summary="Adjust product stock",
    description="""
    Add units to or subtract units from a product's stock.

    Body: `{"operation": "add" | "subtract", "quantity": <positive integer>}`.
    A subtract larger than the available stock fails with 400 and leaves
    the product unchanged.
    """
)
def adjust_stock(
    product_id: str,
    payload: Any = Body(None),
    catalog: CatalogStore = Depends(get_catalog)
):
    """Adjust stock for inventory management."""
    service = ProductService(catalog)
    parsed_id = parse_product_id(product_id)
    adjustment = parse_stock_adjustment(payload)
    product = service.adjust_stock(parsed_id, adjustment)

    if adjustment.operation == "add":
        message = f"Added {adjustment.quantity} units to stock"
    else:
        message = f"Subtracted {adjustment.quantity} units from stock"

    return ProductMessageResponse(message=message, product=product)
