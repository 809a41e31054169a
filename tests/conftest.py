import pytest
from datetime import datetime, timedelta, timezone
from fastapi.testclient import TestClient

from product_service.main import app
from product_service.database import create_catalog
from product_service.services.product_service import ProductService


class FakeClock:
    """Clock that only moves when a test tells it to."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


@pytest.fixture(scope="function")
def client():
    """Create test client; the lifespan builds a fresh seeded catalog for each test."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(scope="function")
def catalog():
    """Seeded catalog for direct store access in tests."""
    return create_catalog(seed=True)


@pytest.fixture(scope="function")
def clock():
    return FakeClock(datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture(scope="function")
def service(catalog, clock):
    """Product service over the seeded catalog with a controllable clock."""
    return ProductService(catalog, clock=clock, default_page_size=10)


@pytest.fixture(scope="function")
def new_product():
    """Valid creation payload."""
    return {
        "name": "Standing Desk",
        "category": "Furniture",
        "price": 499.5,
        "stock": 3,
        "description": "Height-adjustable desk",
    }
