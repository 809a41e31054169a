import threading
from contextlib import contextmanager
from typing import Iterable, Iterator, List, Optional

from product_service.models.product import Product


class CatalogStore:
    """
    Authoritative in-memory mapping from product id to product record.

    The store is the only place records are mutated. Every method hands out
    copies, so callers can never change the catalog through a returned
    record; changes go back through ``insert``, ``replace`` or ``remove``.

    LOCKING STRATEGY:
    =================
    All access goes through one re-entrant lock. Services hold it with
    ``locked()`` across a whole operation, so a uniqueness or stock check
    and the write that depends on it are observed as one unit. Two requests
    creating the same name, or two subtracts draining the same stock, are
    serialized instead of racing.
    """

    def __init__(self, products: Iterable[Product] = ()):
        self._lock = threading.RLock()
        self._products: dict = {}
        for product in products:
            self._products[product.id] = product.model_copy()
        self._next_id = max(self._products, default=0) + 1

    @contextmanager
    def locked(self) -> Iterator["CatalogStore"]:
        """Hold the catalog lock for the duration of the block."""
        with self._lock:
            yield self

    def next_id(self) -> int:
        """Allocate the next product id. Retired ids are never handed out again."""
        with self._lock:
            product_id = self._next_id
            self._next_id += 1
            return product_id

    def get(self, product_id: int) -> Optional[Product]:
        """Get a copy of a product by ID, or None if it doesn't exist."""
        with self._lock:
            product = self._products.get(product_id)
            return product.model_copy() if product is not None else None

    def list(self) -> List[Product]:
        """Snapshot of every product, in catalog (insertion) order."""
        with self._lock:
            return [product.model_copy() for product in self._products.values()]

    def insert(self, product: Product) -> None:
        with self._lock:
            if product.id in self._products:
                raise ValueError(f"Product with ID {product.id} already exists")
            self._products[product.id] = product.model_copy()

    def replace(self, product_id: int, product: Product) -> None:
        """Swap in a new version of a product, keeping its catalog position."""
        with self._lock:
            if product_id not in self._products:
                raise KeyError(product_id)
            self._products[product_id] = product.model_copy()

    def remove(self, product_id: int) -> Optional[Product]:
        """Remove a product and return it, or None if it doesn't exist."""
        with self._lock:
            return self._products.pop(product_id, None)

    def exists_name_conflict(self, name: str, exclude_id: Optional[int] = None) -> bool:
        """Check whether a product other than ``exclude_id`` uses ``name``, ignoring case."""
        wanted = name.lower()
        with self._lock:
            return any(
                product.name.lower() == wanted
                for product_id, product in self._products.items()
                if product_id != exclude_id
            )

    def categories(self) -> List[str]:
        """Distinct categories, sorted."""
        with self._lock:
            return sorted({product.category for product in self._products.values()})

    def __len__(self) -> int:
        with self._lock:
            return len(self._products)
