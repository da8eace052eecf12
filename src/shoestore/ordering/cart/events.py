"""Domain events for the ShoppingCart aggregate."""

from protean.fields import Float, Identifier, Integer

from shoestore.domain import shoestore


@shoestore.event(part_of="ShoppingCart")
class CartItemAdded:
    """A product size was added to the shopping cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)
    size = Float(required=True)
    quantity = Integer(required=True)
    line_quantity = Integer(required=True)


@shoestore.event(part_of="ShoppingCart")
class CartQuantityUpdated:
    """The quantity of a cart line was changed."""

    __version__ = 1

    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)
    size = Float(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@shoestore.event(part_of="ShoppingCart")
class CartItemRemoved:
    """A line was removed from the shopping cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)
    size = Float(required=True)


@shoestore.event(part_of="ShoppingCart")
class CartCleared:
    """Every line was removed from the shopping cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    items_removed = Integer(required=True)
