"""Admin status changes: command and handler.

Cancelling an order returns its reserved units to the product sizes.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from shoestore.catalogue.product import Product
from shoestore.domain import shoestore
from shoestore.ordering.order.order import Order, OrderStatus
from shoestore.utils.logging import get_logger

logger = get_logger(__name__)


@shoestore.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=20)


def _release_reserved_stock(order):
    product_repo = current_domain.repository_for(Product)
    touched = {}
    for item in order.items:
        product_id = str(item.product_id)
        if product_id not in touched:
            try:
                touched[product_id] = product_repo.get(product_id)
            except ObjectNotFoundError:
                logger.warning("restock_skipped_missing_product", order_id=str(order.id), product_id=product_id)
                continue
        touched[product_id].release_stock(item.size, item.quantity)

    for product in touched.values():
        product_repo.add(product)


@shoestore.command_handler(part_of=Order)
class UpdateOrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_order_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.change_status(command.status)

        if order.status == OrderStatus.CANCELLED.value:
            _release_reserved_stock(order)

        repo.add(order)
        logger.info("order_status_changed", order_id=str(order.id), status=order.status)
        return order.status
