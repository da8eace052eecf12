"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from shoestore.domain import shoestore


@shoestore.event(part_of="Product")
class ProductAdded:
    """A new shoe was added to the catalogue."""

    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    category: String(required=True)
    price: Float(required=True)
    added_at: DateTime(required=True)


@shoestore.event(part_of="Product")
class ProductDetailsUpdated:
    """An administrator edited product details, images or sizes."""

    __version__ = 1

    product_id: Identifier(required=True)
    changed_fields: Text(required=True)  # JSON array of field names
    updated_at: DateTime(required=True)


@shoestore.event(part_of="Product")
class StockReserved:
    """Units of one size were set aside for a placed order."""

    __version__ = 1

    product_id: Identifier(required=True)
    size: Float(required=True)
    quantity: Integer(required=True)
    remaining: Integer(required=True)


@shoestore.event(part_of="Product")
class StockReleased:
    """Reserved units returned to stock after an order was cancelled."""

    __version__ = 1

    product_id: Identifier(required=True)
    size: Float(required=True)
    quantity: Integer(required=True)
    available: Integer(required=True)
