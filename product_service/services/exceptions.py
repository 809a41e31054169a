from typing import Any, List


class CatalogError(Exception):
    """Base class for every failure raised by catalog operations."""
    pass


class ValidationFailedError(CatalogError):
    """Exception raised when a payload breaks one or more field rules."""

    def __init__(self, violations: List[str]):
        self.violations = list(violations)
        super().__init__("Validation failed")


class ProductNotFoundError(CatalogError):
    """Exception raised when the requested product doesn't exist."""

    def __init__(self, product_id: int):
        self.product_id = product_id
        super().__init__("Product not found")


class NameConflictError(CatalogError):
    """Exception raised when another product already uses the name (ignoring case)."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Product with name '{name}' already exists")


class InsufficientStockError(CatalogError):
    """Exception raised when there's not enough stock to subtract."""

    def __init__(self, available: int, requested: int):
        self.available = available
        self.requested = requested
        super().__init__(
            f"Insufficient stock. Available: {available}, Requested: {requested}"
        )


class InvalidOperationError(CatalogError):
    """Exception raised for a malformed stock adjustment request."""

    def __init__(self, value: Any, message: str):
        self.value = value
        super().__init__(message)


class InvalidIdentifierError(CatalogError):
    """Exception raised when a product id does not parse as an integer."""

    def __init__(self, raw: Any):
        self.raw = raw
        super().__init__("Invalid product id")
