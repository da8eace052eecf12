"""Cart store: one facade over a guest (local) and an authenticated (remote) cart.

Cart lines share one shape on both backends::

    {"product": {"id", "name", "price", "images"}, "size": 9.5, "quantity": 2}

The guest list is persisted under the ``guest_cart`` storage key; the remote
cart lives on the server and is re-read from every mutating response.
"""

import math
from abc import ABC, abstractmethod
from collections.abc import Mapping

from shoestore.client.errors import ItemNotFoundError, NotFoundError, ValidationError
from shoestore.client.http import ApiClient
from shoestore.client.session import SessionContext
from shoestore.client.storage import GUEST_CART_KEY, LocalStore
from shoestore.utils.logging import get_logger

logger = get_logger(__name__)


def product_snapshot(product: Mapping) -> dict:
    images = product.get("images") or []
    return {
        "id": str(product["id"]),
        "name": product.get("name"),
        "price": product.get("price"),
        "images": list(images),
    }


def line_product_id(item: Mapping) -> str | None:
    product = item.get("product")
    if isinstance(product, Mapping) and product.get("id"):
        return str(product["id"])
    if item.get("product_id"):
        return str(item["product_id"])
    return None


def _same_size(a, b) -> bool:
    try:
        return float(a) == float(b)
    except (TypeError, ValueError):
        return False


def _matches(item: Mapping, product_id, size) -> bool:
    return line_product_id(item) == str(product_id) and _same_size(item.get("size"), size)


def parse_size(value) -> float:
    """Coerce a shoe size to a finite float, or raise ValidationError."""
    if isinstance(value, bool):
        raise ValidationError("Invalid size")
    try:
        size = float(value)
    except (TypeError, ValueError):
        raise ValidationError("Invalid size") from None
    if not math.isfinite(size):
        raise ValidationError("Invalid size")
    return size


def is_positive_quantity(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 1


class CartBackend(ABC):
    """Where cart lines are kept. Every operation returns the updated lines."""

    @abstractmethod
    def load(self) -> list[dict]: ...

    @abstractmethod
    def add(self, product: dict, size: float, quantity: int) -> list[dict]: ...

    @abstractmethod
    def remove(self, product_id: str, size: float) -> list[dict]: ...

    @abstractmethod
    def update_quantity(self, product_id: str, size: float, quantity: int) -> list[dict]: ...

    @abstractmethod
    def clear(self) -> list[dict]: ...


class LocalCartBackend(CartBackend):
    """Guest cart persisted in client-local storage."""

    def __init__(self, store: LocalStore) -> None:
        self.store = store

    def load(self) -> list[dict]:
        items = self.store.get(GUEST_CART_KEY, [])
        return list(items) if isinstance(items, list) else []

    def _save(self, items: list[dict]) -> list[dict]:
        self.store.set(GUEST_CART_KEY, items)
        return items

    def add(self, product: dict, size: float, quantity: int) -> list[dict]:
        items = self.load()
        existing = next((i for i in items if _matches(i, product["id"], size)), None)
        if existing:
            existing["quantity"] = existing.get("quantity", 0) + quantity
        else:
            items.append({"product": product, "size": size, "quantity": quantity})
        return self._save(items)

    def remove(self, product_id: str, size: float) -> list[dict]:
        items = self.load()
        remaining = [i for i in items if not _matches(i, product_id, size)]
        if len(remaining) == len(items):
            raise ItemNotFoundError()
        return self._save(remaining)

    def update_quantity(self, product_id: str, size: float, quantity: int) -> list[dict]:
        items = self.load()
        existing = next((i for i in items if _matches(i, product_id, size)), None)
        if existing is None:
            raise ItemNotFoundError()
        existing["quantity"] = quantity
        return self._save(items)

    def clear(self) -> list[dict]:
        self.store.remove(GUEST_CART_KEY)
        return []


class RemoteCartBackend(CartBackend):
    """Server cart of the signed-in customer."""

    def __init__(self, api: ApiClient) -> None:
        self.api = api

    @staticmethod
    def _lines(payload) -> list[dict]:
        raw = payload.get("items", []) if isinstance(payload, Mapping) else payload or []
        return [
            {
                "product": item.get("product"),
                "product_id": item.get("product_id"),
                "size": item.get("size"),
                "quantity": item.get("quantity"),
            }
            for item in raw
        ]

    def load(self) -> list[dict]:
        return self._lines(self.api.get("/cart"))

    def add(self, product: dict, size: float, quantity: int) -> list[dict]:
        payload = {"product_id": product["id"], "size": size, "quantity": quantity}
        return self._lines(self.api.post("/cart/add", json=payload))

    def remove(self, product_id: str, size: float) -> list[dict]:
        try:
            return self._lines(self.api.post("/cart/remove", json={"product_id": product_id, "size": size}))
        except NotFoundError as exc:
            raise ItemNotFoundError(detail=exc.detail, status_code=exc.status_code) from exc

    def update_quantity(self, product_id: str, size: float, quantity: int) -> list[dict]:
        payload = {"product_id": product_id, "size": size, "quantity": quantity}
        try:
            return self._lines(self.api.post("/cart/update", json=payload))
        except NotFoundError as exc:
            raise ItemNotFoundError(detail=exc.detail, status_code=exc.status_code) from exc

    def clear(self) -> list[dict]:
        return self._lines(self.api.post("/cart/clear"))


class CartStore:
    """The shopper's cart, backed by local storage or the server.

    The backend is chosen from the session on every call. Input is validated
    before any backend is touched, so a rejected call never mutates the cart
    nor reaches the network.
    """

    def __init__(self, session: SessionContext, local: LocalCartBackend, remote: RemoteCartBackend) -> None:
        self.session = session
        self.local = local
        self.remote = remote
        self.items: list[dict] = []

    @property
    def backend(self) -> CartBackend:
        return self.remote if self.session.is_authenticated else self.local

    def reload(self) -> list[dict]:
        self.items = self.backend.load()
        return self.items

    def add(self, product: Mapping | None, size, quantity: int = 1) -> list[dict]:
        if not isinstance(product, Mapping) or not product.get("id"):
            raise ValidationError("Invalid product information")
        if size is None or size == "":
            raise ValidationError("Please select a size")
        size = parse_size(size)
        if not is_positive_quantity(quantity):
            raise ValidationError("Quantity must be at least 1")

        self.items = self.backend.add(product_snapshot(product), size, quantity)
        return self.items

    def remove(self, product_id: str, size) -> list[dict]:
        if not product_id or size is None:
            raise ValidationError("Invalid item information")
        self.items = self.backend.remove(str(product_id), parse_size(size))
        return self.items

    def update_quantity(self, product_id: str, size, quantity: int) -> list[dict]:
        if not product_id or size is None or not is_positive_quantity(quantity):
            raise ValidationError("Invalid update information")
        self.items = self.backend.update_quantity(str(product_id), parse_size(size), quantity)
        return self.items

    def clear(self) -> list[dict]:
        self.items = self.backend.clear()
        return self.items

    def clear_local(self) -> None:
        """Drop the guest list and the in-memory lines without calling the server."""
        self.local.clear()
        self.items = []

    @property
    def total(self) -> float:
        total = 0.0
        for item in self.items:
            product = item.get("product") if isinstance(item, Mapping) else None
            price = product.get("price") if isinstance(product, Mapping) else None
            quantity = item.get("quantity") if isinstance(item, Mapping) else None
            if (
                not isinstance(price, int | float)
                or isinstance(price, bool)
                or not isinstance(quantity, int | float)
                or not quantity
            ):
                logger.warning("invalid_cart_item", item=item)
                continue
            total += price * quantity
        return round(total, 2)

    @property
    def item_count(self) -> int:
        return len(self.items)
