"""Cart item management: commands and handler.

Carts are addressed by customer; the handler creates the cart on first use.
"""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Float, Identifier, Integer
from protean.utils.globals import current_domain

from shoestore.catalogue.product import Product, is_shoe_size
from shoestore.domain import shoestore
from shoestore.ordering.cart.cart import ShoppingCart


def cart_for(customer_id) -> ShoppingCart:
    """Return the customer's cart, creating and storing an empty one if needed."""
    repo = current_domain.repository_for(ShoppingCart)
    cart = repo.for_customer(customer_id)
    if cart is None:
        cart = ShoppingCart.create(customer_id=customer_id)
        repo.add(cart)
    return cart


@shoestore.command(part_of="ShoppingCart")
class AddToCart:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    size = Float(required=True)
    quantity = Integer(required=True, min_value=1)


@shoestore.command(part_of="ShoppingCart")
class UpdateCartQuantity:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    size = Float(required=True)
    quantity = Integer(required=True, min_value=1)


@shoestore.command(part_of="ShoppingCart")
class RemoveFromCart:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    size = Float(required=True)


@shoestore.command(part_of="ShoppingCart")
class ClearCart:
    customer_id = Identifier(required=True)


@shoestore.command_handler(part_of=ShoppingCart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        if not is_shoe_size(command.size):
            raise ValidationError({"size": [f"Size {command.size} is not a valid shoe size"]})

        product = current_domain.repository_for(Product).get(command.product_id)
        if not product.carries_size(command.size):
            raise ValidationError({"size": [f"{product.name} is not available in size {command.size}"]})

        cart = cart_for(command.customer_id)
        cart.add_item(
            product_id=command.product_id,
            size=command.size,
            quantity=command.quantity,
        )
        current_domain.repository_for(ShoppingCart).add(cart)

    @handle(UpdateCartQuantity)
    def update_cart_quantity(self, command):
        cart = cart_for(command.customer_id)
        cart.update_item_quantity(
            product_id=command.product_id,
            size=command.size,
            quantity=command.quantity,
        )
        current_domain.repository_for(ShoppingCart).add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        cart = cart_for(command.customer_id)
        cart.remove_item(product_id=command.product_id, size=command.size)
        current_domain.repository_for(ShoppingCart).add(cart)

    @handle(ClearCart)
    def clear_cart(self, command):
        cart = cart_for(command.customer_id)
        cart.clear()
        current_domain.repository_for(ShoppingCart).add(cart)
