from collections.abc import Mapping
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, List, Optional
import logging

from product_service.config import get_settings
from product_service.models.product import Product
from product_service.schemas.product import (
    ProductCreate,
    ProductListResponse,
    ProductQueryParams,
    ProductUpdate,
    StockAdjustment,
)
from product_service.services.catalog_store import CatalogStore
from product_service.services.exceptions import (
    InsufficientStockError,
    InvalidIdentifierError,
    InvalidOperationError,
    NameConflictError,
    ProductNotFoundError,
    ValidationFailedError,
)
from product_service.services.product_query import run_query
from product_service.services.validation import validate_create, validate_update
from product_service.utils.parsing import INTEGER_PATTERN, to_integer

logger = logging.getLogger(__name__)

STOCK_OPERATIONS = ("add", "subtract")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_product_id(raw: Any) -> int:
    """
    Parse a product id taken from a path or query string.

    Raises:
        InvalidIdentifierError: If the value is not an integer
    """
    if isinstance(raw, int) and not isinstance(raw, bool):
        return raw
    if not isinstance(raw, str) or not INTEGER_PATTERN.fullmatch(raw.strip()):
        raise InvalidIdentifierError(raw)
    try:
        return int(raw.strip())
    except ValueError:
        raise InvalidIdentifierError(raw)


def parse_stock_adjustment(payload: Any) -> StockAdjustment:
    """
    Decode a stock adjustment body: ``{"operation": ..., "quantity": ...}``.

    Raises:
        InvalidOperationError: If the operation is not add/subtract (any case)
            or the quantity is not a positive integer
    """
    if not isinstance(payload, Mapping):
        raise InvalidOperationError(payload, "Operation and quantity are required")

    operation = payload.get("operation")
    quantity = payload.get("quantity")

    if not operation or quantity is None:
        raise InvalidOperationError(payload, "Operation and quantity are required")

    parsed_quantity = to_integer(quantity)
    if parsed_quantity is None or parsed_quantity <= 0:
        raise InvalidOperationError(quantity, "Quantity must be a positive integer")

    if not isinstance(operation, str) or operation.lower() not in STOCK_OPERATIONS:
        raise InvalidOperationError(
            operation, 'Invalid operation. Use "add" or "subtract"'
        )

    return StockAdjustment(operation=operation.lower(), quantity=parsed_quantity)


class ProductService:
    """
    Service class for catalog reads and mutations.

    This service handles:
    - Listing products (filter, search, sort, paginate)
    - Creating, replacing, patching and deleting products
    - Stock adjustments that never drive stock below zero

    Every failure is detected before the catalog is touched, so a rejected
    operation never leaves a partial change behind. Each operation runs
    under the catalog lock (see ``CatalogStore``).
    """

    def __init__(
        self,
        catalog: CatalogStore,
        clock: Callable[[], datetime] = None,
        default_page_size: int = None,
    ):
        self.catalog = catalog
        self.clock = clock or utcnow
        self.default_page_size = default_page_size or get_settings().DEFAULT_PAGE_SIZE

    def list_products(self, params: ProductQueryParams) -> ProductListResponse:
        """Run the listing pipeline over a snapshot of the catalog."""
        return run_query(self.catalog.list(), params, self.default_page_size)

    def get(self, raw_id: Any) -> Product:
        """
        Get a product by ID.

        Raises:
            InvalidIdentifierError: If the id does not parse
            ProductNotFoundError: If no product has that id
        """
        product_id = parse_product_id(raw_id)
        return self._get_or_raise(product_id)

    def categories(self) -> List[str]:
        return self.catalog.categories()

    def count(self) -> int:
        return len(self.catalog)

    def create(self, payload: Any) -> Product:
        """
        Create a new product.

        Args:
            payload: Request body with name, category, price, stock and
                optional description

        Returns:
            Created product (id assigned, ``updated_at`` unset)

        Raises:
            ValidationFailedError: If any field rule is broken
            NameConflictError: If the name is taken (ignoring case)
        """
        self._raise_violations(validate_create(payload))
        data = ProductCreate.from_payload(payload)

        with self.catalog.locked():
            self._check_name(data.name)

            product = Product(
                id=self.catalog.next_id(),
                name=data.name,
                category=data.category,
                price=data.price,
                stock=data.stock,
                description=data.description or "",
                created_at=self.clock(),
                updated_at=None,
            )
            self.catalog.insert(product)

        logger.info(f"Product #{product.id} created ('{product.name}')")
        return product

    def replace(self, raw_id: Any, payload: Any) -> Product:
        """
        Replace every mutable field of a product.

        A missing or empty ``description`` keeps the current one.

        Raises:
            InvalidIdentifierError, ProductNotFoundError,
            ValidationFailedError, NameConflictError
        """
        product_id = parse_product_id(raw_id)

        with self.catalog.locked():
            current = self._get_or_raise(product_id)

            self._raise_violations(validate_create(payload))
            data = ProductCreate.from_payload(payload)
            self._check_name(data.name, exclude_id=product_id)

            product = current.model_copy(
                update={
                    "name": data.name,
                    "category": data.category,
                    "price": data.price,
                    "stock": data.stock,
                    "description": data.description or current.description,
                    "updated_at": self._stamp(current),
                }
            )
            self.catalog.replace(product_id, product)

        logger.info(f"Product #{product_id} updated")
        return product

    def patch(self, raw_id: Any, payload: Any) -> Product:
        """
        Update only the fields present in the payload.

        Unknown keys (including ``id`` and timestamps) are ignored.

        Raises:
            InvalidIdentifierError, ProductNotFoundError,
            ValidationFailedError, NameConflictError
        """
        product_id = parse_product_id(raw_id)

        with self.catalog.locked():
            current = self._get_or_raise(product_id)

            self._raise_violations(validate_update(payload))
            changes = ProductUpdate.from_payload(payload)
            if "name" in changes.model_fields_set:
                self._check_name(changes.name, exclude_id=product_id)

            update_data = changes.model_dump(exclude_unset=True)
            update_data["updated_at"] = self._stamp(current)

            product = current.model_copy(update=update_data)
            self.catalog.replace(product_id, product)

        logger.info(
            f"Product #{product_id} partially updated "
            f"({', '.join(sorted(changes.model_fields_set)) or 'no fields'})"
        )
        return product

    def delete(self, raw_id: Any) -> Product:
        """
        Delete a product.

        Returns:
            The removed product

        Raises:
            InvalidIdentifierError, ProductNotFoundError
        """
        product_id = parse_product_id(raw_id)

        with self.catalog.locked():
            self._get_or_raise(product_id)
            product = self.catalog.remove(product_id)

        logger.info(f"Product #{product_id} deleted")
        return product

    def adjust_stock(self, raw_id: Any, adjustment: StockAdjustment) -> Product:
        """
        Add units to or subtract units from a product's stock.

        A subtract larger than the available stock is rejected as a whole.

        Raises:
            InvalidIdentifierError, ProductNotFoundError, InsufficientStockError
        """
        product_id = parse_product_id(raw_id)

        with self.catalog.locked():
            current = self._get_or_raise(product_id)

            if adjustment.operation == "subtract":
                if adjustment.quantity > current.stock:
                    logger.warning(
                        f"Rejected stock subtract on product #{product_id}: "
                        f"available {current.stock}, requested {adjustment.quantity}"
                    )
                    raise InsufficientStockError(current.stock, adjustment.quantity)
                stock = current.stock - adjustment.quantity
            else:
                stock = current.stock + adjustment.quantity

            product = current.model_copy(
                update={"stock": stock, "updated_at": self._stamp(current)}
            )
            self.catalog.replace(product_id, product)

        logger.info(
            f"Product #{product_id} stock {adjustment.operation} "
            f"{adjustment.quantity} -> {stock}"
        )
        return product

    def _get_or_raise(self, product_id: int) -> Product:
        product = self.catalog.get(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        return product

    def _check_name(self, name: str, exclude_id: Optional[int] = None) -> None:
        if self.catalog.exists_name_conflict(name, exclude_id):
            logger.warning(f"Rejected duplicate product name '{name}'")
            raise NameConflictError(name)

    def _raise_violations(self, violations: List[str]) -> None:
        if violations:
            logger.warning(f"Rejected product payload: {'; '.join(violations)}")
            raise ValidationFailedError(violations)

    def _stamp(self, product: Product) -> datetime:
        """Timestamp for a mutation, strictly later than the product's last one."""
        now = self.clock()
        previous = product.updated_at or product.created_at
        if now <= previous:
            now = previous + timedelta(microseconds=1)
        return now
