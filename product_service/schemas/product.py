from collections.abc import Mapping
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

from product_service.models.base import CamelModel
from product_service.models.product import Product
from product_service.utils.parsing import to_integer, to_number, to_text


class ProductCreate(BaseModel):
    """
    Decoded payload for creating (or fully replacing) a product.

    Only build this from a payload that passed ``validate_create``.
    ``description`` stays None when the payload omits it so callers can
    pick their own fallback.
    """
    name: str = Field(..., min_length=1, description="Product name")
    category: str = Field(..., min_length=1, description="Product category")
    price: float = Field(..., ge=0, description="Product price (must be non-negative)")
    stock: int = Field(..., ge=0, description="Available stock (must be non-negative)")
    description: Optional[str] = Field(None, description="Product description")

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ProductCreate":
        return cls(
            name=to_text(payload["name"]),
            category=to_text(payload["category"]),
            price=to_number(payload["price"]),
            stock=to_integer(payload["stock"]),
            description=payload.get("description"),
        )


_UPDATE_DECODERS = {
    "name": to_text,
    "category": to_text,
    "price": to_number,
    "stock": to_integer,
    "description": lambda value: value or "",
}


class ProductUpdate(BaseModel):
    """
    Decoded payload for a partial update.

    Presence is tracked through ``model_fields_set``: a field is only
    applied when the payload carried it. Keys outside the known field set
    are dropped.
    """
    name: Optional[str] = Field(None, min_length=1, description="Product name")
    category: Optional[str] = Field(None, min_length=1, description="Product category")
    price: Optional[float] = Field(None, ge=0, description="Product price")
    stock: Optional[int] = Field(None, ge=0, description="Available stock")
    description: Optional[str] = Field(None, description="Product description")

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ProductUpdate":
        values = {
            field: decode(payload[field])
            for field, decode in _UPDATE_DECODERS.items()
            if field in payload
        }
        return cls(**values)


class StockAdjustment(BaseModel):
    """A validated stock change request."""
    operation: Literal["add", "subtract"]
    quantity: int = Field(..., gt=0, description="Units to add or subtract")


class ProductQueryParams(CamelModel):
    """Raw query-string options for listing products, as received."""
    category: Optional[str] = None
    min_price: Optional[str] = None
    max_price: Optional[str] = None
    in_stock: Optional[str] = None
    search: Optional[str] = None
    sort_by: Optional[str] = None
    sort_order: Optional[str] = None
    page: Optional[str] = None
    limit: Optional[str] = None


class PageMetadata(CamelModel):
    """Pagination details for a product listing."""
    total_products: int
    total_pages: int
    current_page: int
    page_size: int
    has_next_page: bool
    has_prev_page: bool


class ProductFilters(CamelModel):
    """Effective (normalized) options a listing was produced with."""
    category: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    in_stock: Optional[bool] = None
    search: Optional[str] = None
    sort_by: str = "id"
    sort_order: Literal["asc", "desc"] = "asc"


class ProductListResponse(CamelModel):
    """Schema for paginated product list response."""
    metadata: PageMetadata
    filters: ProductFilters
    products: list[Product]


class ProductMessageResponse(CamelModel):
    """Schema for mutation responses: a confirmation message and the record."""
    message: str
    product: Product


class CategoryListResponse(CamelModel):
    """Schema for the distinct category listing."""
    total_categories: int
    categories: list[str]
