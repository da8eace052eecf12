"""Pydantic request/response schemas for the Ordering API.

Cart lines and orders as the storefront sees them. Sizes travel as floats and
line items carry a product snapshot, so guest and server carts share a shape.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class ShippingAddressSchema(BaseModel):
    street: str = Field(..., min_length=1, max_length=255)
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=1, max_length=100)
    zip_code: str = Field(..., min_length=1, max_length=20)
    phone: str = Field(..., min_length=1, max_length=20)


class ProductSnapshot(BaseModel):
    id: str
    name: str
    price: float
    images: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Cart Schemas
# ---------------------------------------------------------------------------
class CartLineRequest(BaseModel):
    product_id: str
    size: float


class AddToCartRequest(CartLineRequest):
    quantity: int = Field(1, ge=1)


class UpdateCartQuantityRequest(CartLineRequest):
    quantity: int = Field(..., ge=1)


class CartItemResponse(BaseModel):
    product_id: str
    size: float
    quantity: int
    product: ProductSnapshot | None = None


class CartResponse(BaseModel):
    items: list[CartItemResponse] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Order Schemas
# ---------------------------------------------------------------------------
class OrderLineRequest(BaseModel):
    product_id: str
    size: float
    quantity: int = Field(..., ge=1)
    unit_price: float | None = Field(None, ge=0)


class PlaceOrderRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": [{"product_id": "prod-001", "size": 9, "quantity": 1, "unit_price": 4999.0}],
                    "shipping_address": {
                        "street": "12 MG Road",
                        "city": "Bengaluru",
                        "state": "KA",
                        "zip_code": "560001",
                        "phone": "9876543210",
                    },
                    "total_amount": 4999.0,
                }
            ]
        }
    }

    items: list[OrderLineRequest] = Field(..., min_length=1)
    shipping_address: ShippingAddressSchema
    total_amount: float = Field(..., ge=0)


class PlaceOrderResponse(BaseModel):
    order_id: str
    payment_order_handle: str
    amount: int
    currency: str
    key_id: str


class VerifyPaymentRequest(BaseModel):
    payment_id: str = Field(..., min_length=1)
    payment_order_id: str = Field(..., min_length=1)
    signature: str = Field(..., min_length=1)


class VerifyPaymentResponse(BaseModel):
    status: str
    order_id: str
    payment_status: str


class OrderItemResponse(BaseModel):
    product_id: str
    name: str
    size: float
    quantity: int
    unit_price: float
    image: str | None = None


class OrderResponse(BaseModel):
    id: str
    customer_id: str
    customer_name: str | None = None
    customer_email: str | None = None
    items: list[OrderItemResponse] = Field(default_factory=list)
    shipping_address: ShippingAddressSchema | None = None
    total_amount: float
    currency: str
    status: str
    payment_status: str
    payment_order_handle: str | None = None
    payment_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
