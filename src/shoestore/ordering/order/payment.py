"""Payment verification: command and handler.

The widget callback is only trusted once the gateway confirms the signature
(and, for the real gateway, the captured amount). A repeated callback for the
payment already applied is accepted without changing the order.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from shoestore.domain import shoestore
from shoestore.ordering.order.order import Order
from shoestore.payments.gateway import get_gateway
from shoestore.utils.logging import get_logger

logger = get_logger(__name__)


@shoestore.command(part_of="Order")
class VerifyOrderPayment:
    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    payment_id = String(required=True, max_length=255)
    payment_order_id = String(required=True, max_length=255)
    signature = String(required=True, max_length=512)


@shoestore.command_handler(part_of=Order)
class VerifyOrderPaymentHandler:
    @handle(VerifyOrderPayment)
    def verify_order_payment(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)

        if str(order.customer_id) != str(command.customer_id):
            # Other customers' orders are reported as missing
            raise ObjectNotFoundError(f"Order {command.order_id} does not exist")

        if command.payment_order_id != order.payment_order_handle:
            logger.warning("payment_handle_mismatch", order_id=str(order.id))
            raise ValidationError({"payment_order_id": ["Payment does not belong to this order"]})

        result = get_gateway().verify_payment(
            order_handle=order.payment_order_handle,
            payment_id=command.payment_id,
            signature=command.signature,
            amount_minor=order.amount_minor,
        )
        if not result.verified:
            logger.warning("payment_verification_failed", order_id=str(order.id), reason=result.failure_reason)
            raise ValidationError({"signature": [f"Payment verification failed: {result.failure_reason}"]})

        if order.mark_paid(command.payment_id):
            repo.add(order)
            logger.info("order_paid", order_id=str(order.id), payment_id=command.payment_id)
        else:
            logger.info("payment_already_applied", order_id=str(order.id), payment_id=command.payment_id)

        return {"order_id": str(order.id), "status": order.status, "payment_status": order.payment_status}
