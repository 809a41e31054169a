"""
Product listing pipeline: filter -> search -> sort -> paginate.

Query-string values arrive as raw strings. Parsing is total: an option that
does not parse is treated as absent (numeric filters, ``inStock``) or falls
back to its default (``sortBy``, ``sortOrder``, ``page``, ``limit``). It is
never an error.
"""
import math
from typing import Callable, List, Optional

from product_service.models.product import Product
from product_service.schemas.product import (
    PageMetadata,
    ProductFilters,
    ProductListResponse,
    ProductQueryParams,
)
from product_service.utils.parsing import to_number, to_positive_int

DEFAULT_PAGE = 1
DEFAULT_SORT_FIELD = "id"

SORT_KEYS = {
    "id": lambda product: product.id,
    "name": lambda product: product.name.lower(),
    "price": lambda product: product.price,
    "stock": lambda product: product.stock,
    "createdAt": lambda product: product.created_at,
}

Predicate = Callable[[Product], bool]


def normalize_filters(params: ProductQueryParams) -> ProductFilters:
    """Resolve raw query options into the effective filter and sort settings."""
    sort_by = params.sort_by if params.sort_by in SORT_KEYS else DEFAULT_SORT_FIELD
    sort_order = "desc" if (params.sort_order or "").lower() == "desc" else "asc"

    return ProductFilters(
        category=params.category or None,
        min_price=to_number(params.min_price),
        max_price=to_number(params.max_price),
        in_stock=_parse_in_stock(params.in_stock),
        search=params.search or None,
        sort_by=sort_by,
        sort_order=sort_order,
    )


def build_predicates(filters: ProductFilters) -> List[Predicate]:
    """
    Build the filter predicates in application order.

    Order: category, minPrice, maxPrice, inStock, search. Products must
    satisfy all of them.
    """
    predicates = []

    if filters.category is not None:
        category = filters.category.lower()
        predicates.append(lambda product: product.category.lower() == category)

    if filters.min_price is not None:
        min_price = filters.min_price
        predicates.append(lambda product: product.price >= min_price)

    if filters.max_price is not None:
        max_price = filters.max_price
        predicates.append(lambda product: product.price <= max_price)

    if filters.in_stock is True:
        predicates.append(lambda product: product.stock > 0)
    elif filters.in_stock is False:
        predicates.append(lambda product: product.stock == 0)

    if filters.search is not None:
        term = filters.search.lower()
        predicates.append(
            lambda product: term in product.name.lower()
            or term in product.description.lower()
        )

    return predicates


def sort_products(products: List[Product], sort_by: str, sort_order: str) -> List[Product]:
    """
    Stable sort by one field.

    Names compare case-insensitively. Products that compare equal keep
    their relative order in both directions, so pages stay reproducible.
    """
    key = SORT_KEYS.get(sort_by, SORT_KEYS[DEFAULT_SORT_FIELD])
    return sorted(products, key=key, reverse=sort_order == "desc")


def run_query(
    products: List[Product],
    params: ProductQueryParams,
    default_page_size: int = 10,
) -> ProductListResponse:
    """
    Run the full listing pipeline over a catalog snapshot.

    Args:
        products: Catalog snapshot in catalog order
        params: Raw query-string options
        default_page_size: Page size used when ``limit`` is missing or invalid

    Returns:
        One page of products with pagination metadata and the effective filters
    """
    filters = normalize_filters(params)
    predicates = build_predicates(filters)

    matched = [p for p in products if all(predicate(p) for predicate in predicates)]
    ordered = sort_products(matched, filters.sort_by, filters.sort_order)

    page = to_positive_int(params.page, DEFAULT_PAGE)
    page_size = to_positive_int(params.limit, default_page_size)

    total = len(ordered)
    start = (page - 1) * page_size
    end = start + page_size

    metadata = PageMetadata(
        total_products=total,
        total_pages=math.ceil(total / page_size),
        current_page=page,
        page_size=page_size,
        has_next_page=end < total,
        has_prev_page=start > 0,
    )

    return ProductListResponse(
        metadata=metadata,
        filters=filters,
        products=ordered[start:end],
    )


def _parse_in_stock(value: Optional[str]) -> Optional[bool]:
    if value is None:
        return None
    lowered = value.strip().lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    return None
