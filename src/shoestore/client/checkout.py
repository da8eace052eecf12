"""Checkout: order creation and payment verification from the storefront side.

The flow has three steps:

1. ``begin`` places the order for the current cart and returns the
   ``PaymentRequest`` the gateway widget is opened with.
2. The widget runs outside this library.
3. One of ``complete`` (success callback), ``dismissed`` or ``failed`` is
   called with what the widget reported.

The cart is cleared only after the backend has verified the payment.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, field_validator
from pydantic import ValidationError as PydanticValidationError

from shoestore.client.cart import CartStore, line_product_id
from shoestore.client.config import ClientConfig
from shoestore.client.errors import (
    InvalidPaymentResponse,
    PaymentCancelled,
    PaymentConfigurationError,
    PaymentError,
    PaymentFailed,
    PaymentVerificationError,
    ServerError,
    StorefrontError,
    ValidationError,
)
from shoestore.client.http import ApiClient
from shoestore.client.session import SessionContext
from shoestore.utils.logging import get_logger

logger = get_logger(__name__)

CALLBACK_FIELDS = ("razorpay_payment_id", "razorpay_order_id", "razorpay_signature")


class Navigation(Enum):
    CART = "cart"
    CHECKOUT = "checkout"
    ORDERS = "orders"


class ShippingAddress(BaseModel):
    street: str
    city: str
    state: str
    zip_code: str
    phone: str

    @field_validator("street", "city", "state", "zip_code", "phone")
    @classmethod
    def must_not_be_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("is required")
        return value


@dataclass(frozen=True)
class PaymentRequest:
    """Everything the gateway widget needs to collect the payment."""

    order_id: str
    key_id: str
    order_handle: str
    amount: int  # minor units
    currency: str
    name: str = "Shoe Store"
    description: str = "Payment for your order"
    prefill: dict = field(default_factory=dict)


@dataclass(frozen=True)
class CheckoutOutcome:
    success: bool
    navigate_to: Navigation
    message: str
    order_id: str | None = None


def parse_address(address) -> ShippingAddress:
    if isinstance(address, ShippingAddress):
        return address
    try:
        return ShippingAddress.model_validate(dict(address or {}))
    except PydanticValidationError as exc:
        missing = sorted({str(err["loc"][0]) for err in exc.errors() if err.get("loc")})
        raise ValidationError(f"Please fill in: {', '.join(missing)}", detail=missing) from None


class CheckoutFlow:
    def __init__(self, api: ApiClient, cart: CartStore, config: ClientConfig, session: SessionContext) -> None:
        self.api = api
        self.cart = cart
        self.config = config
        self.session = session

    def begin(self, address) -> PaymentRequest | Navigation:
        """Place the order for the current cart.

        Returns ``Navigation.CART`` when the cart is empty; nothing is sent.
        """
        if not self.cart.items:
            return Navigation.CART

        if not self.config.payment_key_id:
            raise PaymentConfigurationError()

        shipping = parse_address(address)
        lines = [
            {
                "product_id": line_product_id(item),
                "quantity": item.get("quantity"),
                "size": item.get("size"),
                "unit_price": (item.get("product") or {}).get("price"),
            }
            for item in self.cart.items
        ]

        response = self.api.post(
            "/orders",
            json={
                "items": lines,
                "shipping_address": shipping.model_dump(),
                "total_amount": self.cart.total,
            },
        )
        if not isinstance(response, Mapping) or not response.get("order_id") or not response.get("payment_order_handle"):
            raise ServerError("Invalid order response from server")

        user = self.session.user or {}
        logger.info("checkout_started", order_id=response["order_id"])
        return PaymentRequest(
            order_id=response["order_id"],
            key_id=self.config.payment_key_id,
            order_handle=response["payment_order_handle"],
            amount=response.get("amount"),
            currency=response.get("currency", "INR"),
            prefill={"name": user.get("name"), "email": user.get("email"), "contact": shipping.phone},
        )

    def complete(self, order_id: str, callback: Mapping) -> CheckoutOutcome:
        """Handle the widget's success callback."""
        callback = callback or {}
        if any(not callback.get(name) for name in CALLBACK_FIELDS):
            raise InvalidPaymentResponse()

        try:
            self.api.post(
                f"/orders/{order_id}/verify",
                json={
                    "payment_id": callback["razorpay_payment_id"],
                    "payment_order_id": callback["razorpay_order_id"],
                    "signature": callback["razorpay_signature"],
                },
            )
        except StorefrontError as exc:
            logger.warning("payment_verification_rejected", order_id=order_id, error=exc.message)
            raise PaymentVerificationError(detail=exc.message, status_code=exc.status_code) from exc

        try:
            self.cart.clear()
        except StorefrontError as exc:
            logger.warning("cart_clear_failed_after_payment", order_id=order_id, error=exc.message)

        logger.info("payment_verified", order_id=order_id)
        return CheckoutOutcome(
            success=True,
            navigate_to=Navigation.ORDERS,
            message="Order placed successfully!",
            order_id=order_id,
        )

    def dismissed(self, order_id: str) -> CheckoutOutcome:
        """The shopper closed the widget; the order stays unpaid."""
        logger.info("payment_dismissed", order_id=order_id)
        return _retry(order_id, PaymentCancelled())

    def failed(self, order_id: str, error=None) -> CheckoutOutcome:
        description = error.get("description") if isinstance(error, Mapping) else error
        logger.info("payment_failed", order_id=order_id, description=description)
        return _retry(order_id, PaymentFailed(description or None))


def _retry(order_id: str, exc: PaymentError) -> CheckoutOutcome:
    return CheckoutOutcome(success=False, navigate_to=Navigation.CHECKOUT, message=exc.message, order_id=order_id)
