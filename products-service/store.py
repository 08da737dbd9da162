"""
In-memory product store.

Owns the product collection behind a single re-entrant lock. Ids come from
a monotonic counter, so they are never reused after a delete and creating
into an empty store works.
"""
import threading
from typing import Callable, Iterable, List, Optional

from loguru import logger

from models import Product, seed_products


class ProductNotFoundError(Exception):
    """Raised when no product matches the requested id."""

    def __init__(self, product_id: int):
        super().__init__(f"Product {product_id} not found")
        self.product_id = product_id


class ProductStore:
    def __init__(
        self,
        products: Optional[Iterable[Product]] = None,
        on_change: Optional[Callable[[int], None]] = None,
    ):
        self._lock = threading.RLock()
        self._products: List[Product] = [p.model_copy() for p in products or []]
        ids = [p.id for p in self._products]
        if len(ids) != len(set(ids)):
            raise ValueError("Duplicate product ids in initial records")
        self._next_id = max(ids, default=0) + 1
        # Called with the current size once built and after every change
        self._on_change = on_change
        self._changed()

    @classmethod
    def seeded(cls, on_change: Optional[Callable[[int], None]] = None) -> "ProductStore":
        return cls(seed_products(), on_change=on_change)

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change(len(self._products))

    def __len__(self) -> int:
        with self._lock:
            return len(self._products)

    def __contains__(self, product_id: int) -> bool:
        with self._lock:
            return self._find(product_id) is not None

    def _find(self, product_id: int) -> Optional[Product]:
        # Caller holds the lock
        return next((p for p in self._products if p.id == product_id), None)

    def _require(self, product_id: int) -> Product:
        product = self._find(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        return product

    def list(self) -> List[Product]:
        with self._lock:
            return [p.model_copy() for p in self._products]

    def get(self, product_id: int) -> Product:
        with self._lock:
            return self._require(product_id).model_copy()

    def create(self, name: Optional[str], price: float) -> Product:
        with self._lock:
            product = Product(id=self._next_id, name=name, price=price)
            self._next_id += 1
            self._products.append(product)
            self._changed()
            logger.info(f"Product created with ID {product.id}")
            return product.model_copy()

    def update(self, product_id: int, name: Optional[str], price: float) -> Product:
        with self._lock:
            product = self._require(product_id)
            product.name = name
            product.price = price
            self._changed()
            logger.info(f"Product {product_id} updated")
            return product.model_copy()

    def delete(self, product_id: int) -> Product:
        with self._lock:
            product = self._require(product_id)
            self._products.remove(product)
            self._changed()
            logger.info(f"Product {product_id} deleted")
            return product
