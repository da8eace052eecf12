"""Order placement: command and handler.

Turns the submitted cart lines into a pending order. Catalogue prices are
authoritative: the submitted line prices and total only guard against a stale
cart. Stock is reserved and the gateway order is opened in the same unit of
work; the gateway is asked before anything is written, so a gateway failure
leaves no order and no reservation behind.
"""

import json
from collections import defaultdict

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Float, Identifier, Text
from protean.utils.globals import current_domain

from shoestore import settings
from shoestore.catalogue.product import Product, is_shoe_size
from shoestore.domain import shoestore
from shoestore.identity.account import Account
from shoestore.ordering.order.order import Order, order_total
from shoestore.payments.gateway import get_gateway
from shoestore.utils.logging import get_logger

logger = get_logger(__name__)

# Tolerance for float totals computed on the client
TOTAL_TOLERANCE = 0.01


@shoestore.command(part_of="Order")
class PlaceOrder:
    customer_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of {product_id, size, quantity, unit_price}
    shipping_address = Text(required=True)  # JSON: {street, city, state, zip_code, phone}
    total_amount = Float(required=True)


def _load(value):
    return json.loads(value) if isinstance(value, str) else value


def _priced_lines(submitted_items):
    """Resolve each submitted line against the catalogue.

    Returns (lines, products) where lines carry catalogue prices and
    products maps product id to the loaded aggregate.
    """
    product_repo = current_domain.repository_for(Product)
    products = {}
    lines = []
    errors = []

    for position, item in enumerate(submitted_items, start=1):
        product_id = str(item.get("product_id") or "")
        size = item.get("size")
        quantity = item.get("quantity")

        if not product_id or size is None:
            errors.append(f"Line {position} needs a product and a size")
            continue
        if not is_shoe_size(size):
            errors.append(f"Line {position} size {size} is not a valid shoe size")
            continue
        if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 1:
            errors.append(f"Line {position} quantity must be a positive whole number")
            continue

        if product_id not in products:
            try:
                products[product_id] = product_repo.get(product_id)
            except ObjectNotFoundError:
                errors.append(f"Product {product_id} is no longer available")
                continue
        product = products[product_id]

        if not product.carries_size(size):
            errors.append(f"{product.name} is not available in size {size}")
            continue

        submitted_price = item.get("unit_price")
        if submitted_price is not None and abs(float(submitted_price) - product.price) > TOTAL_TOLERANCE:
            errors.append(f"Price of {product.name} changed to {product.price:.2f}; refresh your cart")
            continue

        images = product.image_urls
        lines.append(
            {
                "product_id": product_id,
                "name": product.name,
                "size": float(size),
                "quantity": quantity,
                "unit_price": product.price,
                "image": images[0] if images else None,
            }
        )

    if errors:
        raise ValidationError({"items": errors})
    return lines, products


def _check_stock(lines, products):
    wanted = defaultdict(int)
    for line in lines:
        wanted[(line["product_id"], line["size"])] += line["quantity"]

    shortages = []
    for (product_id, size), quantity in wanted.items():
        product = products[product_id]
        available = product.size_entry(size).stock
        if available < quantity:
            shortages.append(f"Only {available} left of {product.name} in size {size:g}")
    if shortages:
        raise ValidationError({"stock": shortages})
    return wanted


@shoestore.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        submitted_items = _load(command.items) or []
        if not submitted_items:
            raise ValidationError({"items": ["Order must contain at least one item"]})

        lines, products = _priced_lines(submitted_items)

        total = order_total(lines)
        if abs(total - command.total_amount) > TOTAL_TOLERANCE:
            raise ValidationError(
                {"total_amount": [f"Submitted total {command.total_amount:.2f} does not match {total:.2f}"]}
            )

        reservations = _check_stock(lines, products)

        account = current_domain.repository_for(Account).get(command.customer_id)
        order = Order.place(
            customer_id=command.customer_id,
            customer_name=account.name,
            customer_email=account.email,
            items_data=lines,
            shipping_address=_load(command.shipping_address),
            currency=settings.payment_currency(),
        )

        gateway = get_gateway()
        gateway_order = gateway.create_order(
            amount_minor=order.amount_minor,
            currency=order.currency,
            receipt=str(order.id),
        )
        if not gateway_order.success:
            logger.warning("gateway_order_failed", order_id=str(order.id), reason=gateway_order.failure_reason)
            raise ValidationError({"payment": [f"Payment gateway error: {gateway_order.failure_reason}"]})

        order.attach_payment_handle(gateway_order.order_handle)

        product_repo = current_domain.repository_for(Product)
        for (product_id, size), quantity in reservations.items():
            products[product_id].reserve_stock(size, quantity)
        for product in products.values():
            product_repo.add(product)

        current_domain.repository_for(Order).add(order)

        logger.info(
            "order_placed",
            order_id=str(order.id),
            customer_id=str(command.customer_id),
            total_amount=order.total_amount,
            payment_order_handle=order.payment_order_handle,
        )
        return {
            "order_id": str(order.id),
            "payment_order_handle": order.payment_order_handle,
            "amount": order.amount_minor,
            "currency": order.currency,
            "key_id": gateway.key_id,
        }
