"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from shoestore.domain import shoestore


@shoestore.event(part_of="Order")
class OrderPlaced:
    """A customer checked out their cart; the order awaits payment."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    total_amount = Float(required=True)
    currency = String(required=True, max_length=3)
    item_count = Integer(required=True)
    placed_at = DateTime(required=True)


@shoestore.event(part_of="Order")
class OrderPaid:
    """The gateway payment for an order was verified."""

    __version__ = 1

    order_id = Identifier(required=True)
    payment_id = String(required=True)
    payment_order_handle = String(required=True)
    amount = Float(required=True)
    currency = String(required=True, max_length=3)
    paid_at = DateTime(required=True)


@shoestore.event(part_of="Order")
class OrderStatusChanged:
    """An order moved forward in its lifecycle."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_at = DateTime(required=True)
