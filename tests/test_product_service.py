"""Tests for catalog mutations through ProductService."""
import threading

import pytest

from product_service.schemas.product import ProductQueryParams, StockAdjustment
from product_service.services.catalog_store import CatalogStore
from product_service.services.exceptions import (
    InsufficientStockError,
    InvalidIdentifierError,
    InvalidOperationError,
    NameConflictError,
    ProductNotFoundError,
    ValidationFailedError,
)
from product_service.services.product_service import (
    ProductService,
    parse_product_id,
    parse_stock_adjustment,
)


def test_create_assigns_id_and_timestamps(service, clock, new_product):
    product = service.create(new_product)

    assert product.id == 5
    assert product.created_at == clock.now
    assert product.updated_at is None
    assert service.get(5) == product


def test_create_defaults_description(service, new_product):
    del new_product["description"]

    assert service.create(new_product).description == ""


def test_ids_strictly_increase_across_deletes(service, new_product):
    first = service.create(new_product)
    service.delete(first.id)
    new_product["name"] = "Another Desk"
    second = service.create(new_product)

    assert second.id == 6
    with pytest.raises(ProductNotFoundError):
        service.get(first.id)


def test_create_validation_failure_leaves_catalog_untouched(service, catalog):
    with pytest.raises(ValidationFailedError) as exc_info:
        service.create({"name": "Tablet", "price": "free"})

    assert exc_info.value.violations == [
        "Category is required",
        "Price must be a non-negative number",
        "Stock quantity is required",
    ]
    assert len(catalog) == 4
    assert catalog.next_id() == 5


def test_create_name_conflict(service, catalog):
    with pytest.raises(NameConflictError) as exc_info:
        service.create({"name": "Laptop", "category": "x", "price": 10, "stock": 1})

    assert exc_info.value.name == "Laptop"
    assert len(catalog) == 4


def test_create_name_conflict_ignores_surrounding_whitespace(service):
    with pytest.raises(NameConflictError):
        service.create({"name": " laptop ", "category": "x", "price": 10, "stock": 1})


def test_names_stay_unique_after_mixed_mutations(service, new_product):
    service.create(new_product)
    service.patch("1", {"name": "Notebook"})
    service.create({"name": "laptop", "category": "Electronics", "price": 1, "stock": 1})

    with pytest.raises(NameConflictError):
        service.replace("2", {"name": "NOTEBOOK", "category": "x", "price": 1, "stock": 1})
    with pytest.raises(NameConflictError):
        service.patch("3", {"name": "standing desk"})

    lowered = [p.name.lower() for p in service.catalog.list()]
    assert len(lowered) == len(set(lowered))


def test_replace_updates_all_fields(service, clock):
    clock.advance(minutes=5)

    product = service.replace(
        "3",
        {"name": "Espresso Machine", "category": "Kitchen", "price": "120", "stock": 2,
         "description": "15 bar pump"},
    )

    assert product.name == "Espresso Machine"
    assert product.category == "Kitchen"
    assert product.price == 120.0
    assert product.stock == 2
    assert product.description == "15 bar pump"
    assert product.updated_at == clock.now
    assert product.created_at == service.get(3).created_at


@pytest.mark.parametrize("description", [None, ""])
def test_replace_keeps_description_when_missing_or_empty(service, description):
    payload = {"name": "Laptop", "category": "Electronics", "price": 1, "stock": 1}
    if description is not None:
        payload["description"] = description

    product = service.replace(1, payload)

    assert product.description == "High-performance laptop with 16GB RAM"


def test_replace_can_keep_own_name_in_other_case(service):
    product = service.replace(1, {"name": "LAPTOP", "category": "Electronics", "price": 1, "stock": 1})

    assert product.name == "LAPTOP"


def test_replace_missing_product(service):
    with pytest.raises(ProductNotFoundError) as exc_info:
        service.replace("77", {"name": "x", "category": "y", "price": 1, "stock": 1})

    assert exc_info.value.product_id == 77


def test_patch_only_changes_supplied_fields(service, clock):
    before = service.get(1)

    after = service.patch(1, {"stock": 5})

    assert after.stock == 5
    assert after.name == before.name
    assert after.category == before.category
    assert after.price == before.price
    assert after.description == before.description
    assert after.created_at == before.created_at
    assert after.updated_at > before.created_at


def test_patch_stamp_is_strictly_later_even_with_a_frozen_clock(service):
    first = service.patch(2, {"stock": 1})
    second = service.patch(2, {"stock": 2})

    assert second.updated_at > first.updated_at


def test_patch_drops_unknown_fields(service):
    product = service.patch(2, {"color": "black", "id": 9, "createdAt": "yesterday"})

    assert product.id == 2
    assert not hasattr(product, "color")
    assert product.updated_at is not None


def test_patch_null_description_clears_it(service):
    assert service.patch(1, {"description": None}).description == ""


def test_patch_validation_failure_changes_nothing(service):
    with pytest.raises(ValidationFailedError):
        service.patch(1, {"name": "Ultrabook", "stock": -3})

    product = service.get(1)
    assert product.name == "Laptop"
    assert product.updated_at is None


def test_delete_returns_removed_product(service, catalog):
    removed = service.delete("4")

    assert removed.name == "Desk Chair"
    assert catalog.get(4) is None
    with pytest.raises(ProductNotFoundError):
        service.delete("4")


@pytest.mark.parametrize("raw", ["abc", "1.5", "", None, True, "0_4", "١", "4.0", 4.0])
def test_invalid_identifiers(service, raw):
    with pytest.raises(InvalidIdentifierError):
        service.get(raw)


def test_parse_product_id_accepts_integers():
    assert parse_product_id("12") == 12
    assert parse_product_id(" 3 ") == 3
    assert parse_product_id(7) == 7


def test_stock_add_and_subtract(service, clock):
    clock.advance(hours=1)

    added = service.adjust_stock("4", StockAdjustment(operation="add", quantity=2))
    subtracted = service.adjust_stock("4", StockAdjustment(operation="subtract", quantity=10))

    assert added.stock == 10
    assert subtracted.stock == 0
    assert subtracted.updated_at > added.updated_at


def test_stock_subtract_beyond_available_is_rejected(service):
    before = service.get(1)

    with pytest.raises(InsufficientStockError) as exc_info:
        service.adjust_stock(1, StockAdjustment(operation="subtract", quantity=100))

    assert exc_info.value.available == 15
    assert exc_info.value.requested == 100
    assert str(exc_info.value) == "Insufficient stock. Available: 15, Requested: 100"
    assert service.get(1) == before


def test_stock_never_goes_negative_over_a_sequence(service):
    operations = [
        ("subtract", 5), ("subtract", 5), ("add", 1), ("subtract", 7),
        ("subtract", 1), ("subtract", 1), ("add", 3), ("subtract", 4),
    ]
    expected = 8

    for operation, quantity in operations:
        try:
            product = service.adjust_stock(4, StockAdjustment(operation=operation, quantity=quantity))
        except InsufficientStockError:
            product = service.get(4)
        else:
            expected += quantity if operation == "add" else -quantity
        assert product.stock == expected
        assert product.stock >= 0


def test_concurrent_subtracts_never_oversell(catalog):
    service = ProductService(catalog, default_page_size=10)
    outcomes = []

    def buy():
        try:
            service.adjust_stock(4, StockAdjustment(operation="subtract", quantity=1))
            outcomes.append("ok")
        except InsufficientStockError:
            outcomes.append("rejected")

    threads = [threading.Thread(target=buy) for _ in range(20)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert outcomes.count("ok") == 8
    assert outcomes.count("rejected") == 12
    assert catalog.get(4).stock == 0


def test_concurrent_creates_with_same_name_admit_one(catalog):
    service = ProductService(catalog, default_page_size=10)
    outcomes = []

    def create():
        try:
            service.create({"name": "Gadget", "category": "Toys", "price": 1, "stock": 1})
            outcomes.append("ok")
        except NameConflictError:
            outcomes.append("conflict")

    threads = [threading.Thread(target=create) for _ in range(10)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert outcomes.count("ok") == 1
    assert len(catalog) == 5


@pytest.mark.parametrize(
    "payload, message",
    [
        ({}, "Operation and quantity are required"),
        ({"operation": "add"}, "Operation and quantity are required"),
        (None, "Operation and quantity are required"),
        ({"operation": "add", "quantity": 0}, "Quantity must be a positive integer"),
        ({"operation": "add", "quantity": "2.5"}, "Quantity must be a positive integer"),
        ({"operation": "remove", "quantity": 1}, 'Invalid operation. Use "add" or "subtract"'),
        ({"operation": 3, "quantity": 1}, 'Invalid operation. Use "add" or "subtract"'),
    ],
)
def test_parse_stock_adjustment_rejects(payload, message):
    with pytest.raises(InvalidOperationError) as exc_info:
        parse_stock_adjustment(payload)

    assert str(exc_info.value) == message


def test_parse_stock_adjustment_normalizes():
    adjustment = parse_stock_adjustment({"operation": "Subtract", "quantity": "3"})

    assert adjustment == StockAdjustment(operation="subtract", quantity=3)


def test_list_products_uses_default_page_size(catalog):
    service = ProductService(catalog, default_page_size=2)

    response = service.list_products(ProductQueryParams())

    assert response.metadata.page_size == 2
    assert response.metadata.total_pages == 2


def test_empty_catalog_starts_ids_at_one():
    service = ProductService(CatalogStore(), default_page_size=10)

    product = service.create({"name": "First", "category": "A", "price": 0, "stock": 0})

    assert product.id == 1
    assert service.categories() == ["A"]
    assert service.count() == 1


def test_large_integer_stock_is_stored_exactly(service):
    product = service.create(
        {"name": "Bolts", "category": "Hardware", "price": 0.1, "stock": 2**53 + 1}
    )

    assert product.stock == 9007199254740993
    assert service.patch(product.id, {"stock": "9007199254740995"}).stock == 9007199254740995


def test_large_integer_quantity_is_kept_exactly():
    adjustment = parse_stock_adjustment({"operation": "add", "quantity": 2**53 + 1})

    assert adjustment.quantity == 9007199254740993
