"""
Field rules for product payloads.

Both validators are pure: they only inspect the payload and return every
broken rule, in field order, as a human-readable message. An empty list
means the payload is valid.
"""
from collections.abc import Mapping
from typing import Any, List

from product_service.utils.parsing import to_number, to_text

BODY_NOT_OBJECT = "Request body must be a JSON object"
NAME_REQUIRED = "Product name is required"
CATEGORY_REQUIRED = "Category is required"
PRICE_REQUIRED = "Price is required"
PRICE_INVALID = "Price must be a non-negative number"
STOCK_REQUIRED = "Stock quantity is required"
STOCK_INVALID = "Stock must be a non-negative number"
STOCK_NOT_INTEGER = "Stock must be an integer"
DESCRIPTION_INVALID = "Description must be a string"


def validate_create(payload: Any) -> List[str]:
    """Check a payload for creating or fully replacing a product."""
    if not isinstance(payload, Mapping):
        return [BODY_NOT_OBJECT]

    violations = []

    if to_text(payload.get("name")) is None:
        violations.append(NAME_REQUIRED)

    if to_text(payload.get("category")) is None:
        violations.append(CATEGORY_REQUIRED)

    if payload.get("price") is None:
        violations.append(PRICE_REQUIRED)
    else:
        violations.extend(_price_violations(payload["price"]))

    if payload.get("stock") is None:
        violations.append(STOCK_REQUIRED)
    else:
        violations.extend(_stock_violations(payload["stock"]))

    violations.extend(_description_violations(payload))
    return violations


def validate_update(payload: Any) -> List[str]:
    """Check a partial payload; only the fields it carries are validated."""
    if not isinstance(payload, Mapping):
        return [BODY_NOT_OBJECT]

    violations = []

    if "name" in payload and to_text(payload["name"]) is None:
        violations.append(NAME_REQUIRED)

    if "category" in payload and to_text(payload["category"]) is None:
        violations.append(CATEGORY_REQUIRED)

    if "price" in payload:
        violations.extend(_price_violations(payload["price"]))

    if "stock" in payload:
        violations.extend(_stock_violations(payload["stock"]))

    violations.extend(_description_violations(payload))
    return violations


def _price_violations(value: Any) -> List[str]:
    price = to_number(value)
    if price is None or price < 0:
        return [PRICE_INVALID]
    return []


def _stock_violations(value: Any) -> List[str]:
    stock = to_number(value)
    if stock is None or stock < 0:
        return [STOCK_INVALID]
    if not stock.is_integer():
        return [STOCK_NOT_INTEGER]
    return []


def _description_violations(payload: Mapping) -> List[str]:
    description = payload.get("description")
    if description is not None and not isinstance(description, str):
        return [DESCRIPTION_INVALID]
    return []
