from datetime import datetime, timezone

from fastapi import Request

from product_service.models.product import Product
from product_service.services.catalog_store import CatalogStore

# Demo catalog the service starts with (ids 1..4)
SEED_PRODUCTS = [
    Product(
        id=1,
        name="Laptop",
        category="Electronics",
        price=999.99,
        stock=15,
        description="High-performance laptop with 16GB RAM",
        created_at=datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc),
    ),
    Product(
        id=2,
        name="Smartphone",
        category="Electronics",
        price=699.99,
        stock=25,
        description="Latest smartphone with 128GB storage",
        created_at=datetime(2024, 1, 20, 14, 45, tzinfo=timezone.utc),
    ),
    Product(
        id=3,
        name="Coffee Maker",
        category="Home Appliances",
        price=89.99,
        stock=40,
        description="Programmable coffee maker with thermal carafe",
        created_at=datetime(2024, 1, 25, 9, 15, tzinfo=timezone.utc),
    ),
    Product(
        id=4,
        name="Desk Chair",
        category="Furniture",
        price=249.99,
        stock=8,
        description="Ergonomic office chair with lumbar support",
        created_at=datetime(2024, 2, 1, 11, 20, tzinfo=timezone.utc),
    ),
]


def create_catalog(seed: bool = True) -> CatalogStore:
    """Build the process-wide catalog, optionally pre-populated with the demo products."""
    return CatalogStore(SEED_PRODUCTS if seed else ())


def get_catalog(request: Request) -> CatalogStore:
    """
    Dependency to get the catalog created at application startup.
    """
    return request.app.state.catalog
