from datetime import datetime
from typing import Optional

from product_service.models.base import CamelModel


class Product(CamelModel):
    """
    Product record held by the in-memory catalog.

    Attributes:
        id: Unique identifier assigned by the catalog (never reused)
        name: Product name (unique, ignoring case)
        category: Product category
        price: Product price (must be non-negative)
        stock: Available quantity (must be non-negative)
        description: Free-text description
        created_at: Timestamp when product was created
        updated_at: Timestamp of the last successful mutation, None until then
    """

    id: int
    name: str
    category: str
    price: float
    stock: int
    description: str = ""
    created_at: datetime
    updated_at: Optional[datetime] = None

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}', stock={self.stock})>"
