"""Pydantic request/response schemas for the Admin API."""

from datetime import datetime

from pydantic import BaseModel, Field


class OrderSummaryResponse(BaseModel):
    id: str
    customer_name: str | None = None
    customer_email: str | None = None
    total_amount: float
    status: str
    payment_status: str
    created_at: datetime | None = None


class TopProductResponse(BaseModel):
    product_id: str
    name: str
    brand: str | None = None
    category: str | None = None
    price: float
    image: str | None = None
    units_sold: int
    revenue: float


class DashboardResponse(BaseModel):
    total_revenue: float = 0.0
    total_orders: int = 0
    total_users: int = 0
    pending_orders: int = 0
    recent_orders: list[OrderSummaryResponse] = Field(default_factory=list)
    top_products: list[TopProductResponse] = Field(default_factory=list)


class UpdateOrderStatusRequest(BaseModel):
    status: str


class UploadResponse(BaseModel):
    urls: list[str]
