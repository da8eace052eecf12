"""Shopping Cart aggregate (CQRS): the server-side cart of a signed-in customer.

Each customer owns exactly one cart, created lazily on first access. Lines are
keyed by (product, size); adding an existing line increases its quantity.
Guest carts never reach the server as carts: the storefront replays them here
one line at a time when the shopper signs in.
"""

from datetime import UTC, datetime

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer

from shoestore.domain import shoestore
from shoestore.ordering.cart.events import CartCleared, CartItemAdded, CartItemRemoved, CartQuantityUpdated


@shoestore.entity(part_of="ShoppingCart")
class CartItem:
    product_id = Identifier(required=True)
    size = Float(required=True)
    quantity = Integer(required=True, min_value=1)
    added_at = DateTime()


@shoestore.aggregate
class ShoppingCart:
    customer_id = Identifier(required=True)
    items = HasMany(CartItem)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, customer_id):
        now = datetime.now(UTC)
        return cls(customer_id=customer_id, created_at=now, updated_at=now)

    def find_item(self, product_id, size):
        return next(
            (i for i in self.items if str(i.product_id) == str(product_id) and float(i.size) == float(size)),
            None,
        )

    def _require_item(self, product_id, size):
        item = self.find_item(product_id, size)
        if item is None:
            raise ObjectNotFoundError(f"Item {product_id} in size {size} is not in the cart")
        return item

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(self, product_id, size, quantity):
        """Add a line to the cart, or grow the quantity of the matching line."""
        if quantity is None or quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        now = datetime.now(UTC)
        existing = self.find_item(product_id, size)
        if existing:
            existing.quantity += quantity
            line_quantity = existing.quantity
        else:
            self.add_items(
                CartItem(
                    product_id=product_id,
                    size=float(size),
                    quantity=quantity,
                    added_at=now,
                )
            )
            line_quantity = quantity

        self.updated_at = now

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                product_id=str(product_id),
                size=float(size),
                quantity=quantity,
                line_quantity=line_quantity,
            )
        )

    def update_item_quantity(self, product_id, size, quantity):
        """Set the quantity of an existing line."""
        if quantity is None or quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        item = self._require_item(product_id, size)
        previous_quantity = item.quantity
        item.quantity = quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartQuantityUpdated(
                cart_id=str(self.id),
                product_id=str(product_id),
                size=float(size),
                previous_quantity=previous_quantity,
                new_quantity=quantity,
            )
        )

    def remove_item(self, product_id, size):
        item = self._require_item(product_id, size)
        self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemRemoved(
                cart_id=str(self.id),
                product_id=str(product_id),
                size=float(size),
            )
        )

    def clear(self):
        removed = len(self.items)
        for item in list(self.items):
            self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(CartCleared(cart_id=str(self.id), items_removed=removed))


@shoestore.repository(part_of=ShoppingCart)
class ShoppingCartRepository:
    def for_customer(self, customer_id) -> ShoppingCart | None:
        return self._dao.query.filter(customer_id=str(customer_id)).all().first
