"""Order aggregate (CQRS): an immutable snapshot of a checked-out cart.

State Machine:
    PENDING → PROCESSING → SHIPPED → DELIVERED
    CANCELLED (from PENDING, PROCESSING)

Payment verification is the only automated transition (pending → processing);
every other move is made by an administrator. Line prices are frozen when the
order is placed, so later catalogue edits never change an order.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, ValueObject

from shoestore.domain import shoestore
from shoestore.ordering.order.events import OrderPaid, OrderPlaced, OrderStatusChanged


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(Enum):
    AWAITING_PAYMENT = "awaiting_payment"
    PAID = "paid"


# State machine transition map
_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}


def order_total(lines) -> float:
    """Sum of unit_price × quantity, rounded to two decimals."""
    return round(sum(float(line["unit_price"]) * int(line["quantity"]) for line in lines), 2)


def to_minor_units(amount: float) -> int:
    return int(round(amount * 100))


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@shoestore.value_object(part_of="Order")
class ShippingAddress:
    """Where the order is delivered, captured at checkout and never edited."""

    street = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    zip_code = String(required=True, max_length=20)
    phone = String(required=True, max_length=20)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@shoestore.entity(part_of="Order")
class OrderItem:
    """A purchased product size with the price paid for it."""

    product_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    size = Float(required=True)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)
    image = String(max_length=1000)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@shoestore.aggregate
class Order:
    customer_id = Identifier(required=True)
    customer_name = String(max_length=100)
    customer_email = String(max_length=254)
    items = HasMany(OrderItem)
    shipping_address = ValueObject(ShippingAddress)
    total_amount = Float(required=True, min_value=0.0)
    currency = String(max_length=3, default="INR")
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.AWAITING_PAYMENT.value)
    payment_order_handle = String(max_length=255)
    payment_id = String(max_length=255)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def total_must_match_items(self):
        if not self.items:
            return
        expected = order_total(
            [{"unit_price": item.unit_price, "quantity": item.quantity} for item in self.items]
        )
        if abs((self.total_amount or 0.0) - expected) > 0.005:
            raise ValidationError({"total_amount": [f"Order total {self.total_amount} does not match items ({expected})"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, customer_id, items_data, shipping_address, currency, customer_name=None, customer_email=None):
        """Create a pending order.

        Args:
            customer_id: Account placing the order.
            items_data: List of dicts with product_id, name, size, quantity,
                        unit_price and image. Prices must already come from
                        the catalogue.
            shipping_address: Dict with street, city, state, zip_code, phone.
            currency: ISO currency code the gateway will charge in.
        """
        if not items_data:
            raise ValidationError({"items": ["Order must contain at least one item"]})

        now = datetime.now(UTC)
        order = cls(
            customer_id=customer_id,
            customer_name=customer_name,
            customer_email=customer_email,
            items=[
                OrderItem(
                    product_id=line["product_id"],
                    name=line["name"],
                    size=float(line["size"]),
                    quantity=line["quantity"],
                    unit_price=line["unit_price"],
                    image=line.get("image"),
                )
                for line in items_data
            ],
            shipping_address=ShippingAddress(**shipping_address),
            total_amount=order_total(items_data),
            currency=currency,
            status=OrderStatus.PENDING.value,
            payment_status=PaymentStatus.AWAITING_PAYMENT.value,
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                customer_id=str(customer_id),
                total_amount=order.total_amount,
                currency=currency,
                item_count=len(items_data),
                placed_at=now,
            )
        )
        return order

    def attach_payment_handle(self, handle):
        """Record the gateway order the customer will pay against."""
        if self.payment_order_handle:
            raise ValidationError({"payment_order_handle": ["Order already has a gateway order"]})
        self.payment_order_handle = handle
        self.updated_at = datetime.now(UTC)

    @property
    def amount_minor(self) -> int:
        return to_minor_units(self.total_amount)

    @property
    def is_paid(self) -> bool:
        return self.payment_status == PaymentStatus.PAID.value

    # -------------------------------------------------------------------
    # State machine helpers
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_state):
        current = OrderStatus(self.status)
        if target_state not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_state.value}"]})

    def _transition(self, target_state):
        previous = self.status
        self.status = target_state.value
        now = datetime.now(UTC)
        self.updated_at = now
        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=previous,
                new_status=target_state.value,
                changed_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Payment
    # -------------------------------------------------------------------
    def mark_paid(self, payment_id):
        """Apply a verified payment.

        A pending order moves to processing. An order an administrator has
        already moved forward keeps its status and only records the payment.
        Returns False when the same payment was already applied, so callers
        can treat a repeated callback as a no-op.
        """
        if self.is_paid:
            if self.payment_id == payment_id:
                return False
            raise ValidationError({"payment_id": ["Order is already paid by a different payment"]})

        if self.status == OrderStatus.CANCELLED.value:
            raise ValidationError({"status": ["Cannot accept payment for a cancelled order"]})

        self.payment_id = payment_id
        self.payment_status = PaymentStatus.PAID.value
        if self.status == OrderStatus.PENDING.value:
            self._transition(OrderStatus.PROCESSING)
        else:
            self.updated_at = datetime.now(UTC)
        self.raise_(
            OrderPaid(
                order_id=str(self.id),
                payment_id=payment_id,
                payment_order_handle=self.payment_order_handle,
                amount=self.total_amount,
                currency=self.currency,
                paid_at=self.updated_at,
            )
        )
        return True

    # -------------------------------------------------------------------
    # Admin transitions
    # -------------------------------------------------------------------
    def change_status(self, new_status):
        try:
            target = OrderStatus(new_status)
        except ValueError:
            raise ValidationError({"status": [f"Unknown order status '{new_status}'"]}) from None

        self._assert_can_transition(target)
        self._transition(target)


@shoestore.repository(part_of=Order)
class OrderRepository:
    def for_customer(self, customer_id, limit: int = 1000) -> list[Order]:
        return (
            self._dao.query.filter(customer_id=str(customer_id)).order_by("-created_at").limit(limit).all().items
        )

    def scan(self, limit: int) -> list[Order]:
        """Newest first, at most ``limit`` orders."""
        return self._dao.query.order_by("-created_at").limit(limit).all().items
