"""Admin console reads and writes.

Dashboard payloads are parsed leniently: a missing or malformed field falls
back to zero, an empty list or a placeholder string rather than failing the
whole page.
"""

import math
from collections.abc import Mapping
from datetime import date
from typing import Any

from pydantic import BaseModel, Field, field_validator

from shoestore.client.errors import ServerError
from shoestore.client.http import ApiClient


def _number(value, default=0.0) -> float:
    if isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default


def _count(value) -> int:
    return int(_number(value, 0))


def _text(value, placeholder: str) -> str:
    if value is None or (isinstance(value, str) and not value.strip()):
        return placeholder
    return str(value)


def product_filters(category=None, search=None, min_price=None, max_price=None) -> dict | None:
    """Query parameters for a product listing, leaving out unset filters."""
    params = {"category": category, "search": search, "min_price": min_price, "max_price": max_price}
    params = {key: value for key, value in params.items() if value not in (None, "")}
    return params or None


def _records(value) -> list[dict]:
    if not isinstance(value, list):
        return []
    return [entry for entry in value if isinstance(entry, Mapping)]


class RecentOrder(BaseModel):
    id: str = "—"
    customer_name: str = "Unknown customer"
    customer_email: str = ""
    total_amount: float = 0.0
    status: str = "unknown"
    created_at: str | None = None

    @classmethod
    def from_payload(cls, payload: Mapping) -> "RecentOrder":
        created_at = payload.get("created_at")
        return cls(
            id=_text(payload.get("id"), "—"),
            customer_name=_text(payload.get("customer_name"), "Unknown customer"),
            customer_email=_text(payload.get("customer_email"), ""),
            total_amount=_number(payload.get("total_amount")),
            status=_text(payload.get("status"), "unknown"),
            created_at=str(created_at) if created_at else None,
        )


class TopProduct(BaseModel):
    product_id: str = ""
    name: str = "Unknown product"
    brand: str = "-"
    category: str = "-"
    price: float = 0.0
    image: str | None = None
    units_sold: int = 0
    revenue: float = 0.0

    @classmethod
    def from_payload(cls, payload: Mapping) -> "TopProduct":
        image = payload.get("image")
        return cls(
            product_id=_text(payload.get("product_id"), ""),
            name=_text(payload.get("name"), "Unknown product"),
            brand=_text(payload.get("brand"), "-"),
            category=_text(payload.get("category"), "-"),
            price=_number(payload.get("price")),
            image=image if isinstance(image, str) else None,
            units_sold=_count(payload.get("units_sold")),
            revenue=_number(payload.get("revenue")),
        )


class DashboardMetrics(BaseModel):
    total_revenue: float = 0.0
    total_orders: int = 0
    total_users: int = 0
    pending_orders: int = 0
    recent_orders: list[RecentOrder] = Field(default_factory=list)
    top_products: list[TopProduct] = Field(default_factory=list)

    @field_validator("total_revenue", mode="before")
    @classmethod
    def _revenue(cls, value):
        return _number(value)

    @field_validator("total_orders", "total_users", "pending_orders", mode="before")
    @classmethod
    def _counts(cls, value):
        return _count(value)

    @field_validator("recent_orders", mode="before")
    @classmethod
    def _recent(cls, value):
        return [RecentOrder.from_payload(entry) for entry in _records(value)]

    @field_validator("top_products", mode="before")
    @classmethod
    def _top(cls, value):
        return [TopProduct.from_payload(entry) for entry in _records(value)]

    @classmethod
    def from_payload(cls, payload: Any) -> "DashboardMetrics":
        if not isinstance(payload, Mapping):
            return cls()
        known = {name: payload[name] for name in cls.model_fields if name in payload}
        return cls.model_validate(known)


def _date_param(value: date | str | None) -> str | None:
    if value is None or value == "":
        return None
    return value.isoformat() if isinstance(value, date) else str(value)


class AdminConsole:
    def __init__(self, api: ApiClient) -> None:
        self.api = api

    def dashboard(self) -> DashboardMetrics:
        return DashboardMetrics.from_payload(self.api.get("/admin/dashboard"))

    def orders(
        self,
        status: str | None = None,
        search: str | None = None,
        start_date: date | str | None = None,
        end_date: date | str | None = None,
    ) -> list[dict]:
        params = {
            "status": status or None,
            "search": search or None,
            "start_date": _date_param(start_date),
            "end_date": _date_param(end_date),
        }
        return self.api.get("/admin/orders", params={k: v for k, v in params.items() if v is not None}) or []

    def update_order_status(self, order_id: str, status: str) -> dict:
        return self.api.put(f"/admin/orders/{order_id}/status", json={"status": status})

    def products(
        self,
        category: str | None = None,
        search: str | None = None,
        min_price: float | None = None,
        max_price: float | None = None,
    ) -> list[dict]:
        params = product_filters(category, search, min_price, max_price)
        return self.api.get("/admin/products", params=params) or []

    def create_product(self, product: Mapping) -> str:
        response = self.api.post("/admin/products", json=dict(product))
        if not isinstance(response, Mapping) or not response.get("product_id"):
            raise ServerError("Invalid product response from server")
        return response["product_id"]

    def update_product(self, product_id: str, changes: Mapping) -> dict:
        return self.api.put(f"/admin/products/{product_id}", json=dict(changes))

    def delete_product(self, product_id: str) -> None:
        self.api.delete(f"/admin/products/{product_id}")

    def upload_images(self, files: list[tuple[str, bytes, str]]) -> list[str]:
        response = self.api.upload("/admin/upload", files)
        urls = response.get("urls") if isinstance(response, Mapping) else None
        if not isinstance(urls, list):
            raise ServerError("Invalid upload response from server")
        return urls
