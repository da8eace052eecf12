"""Razorpay payment gateway adapter.

Uses the razorpay SDK to open orders, verify the checkout signature and
confirm the captured amount against the order total.
"""

import razorpay
import requests
from razorpay.errors import BadRequestError, GatewayError, ServerError, SignatureVerificationError

from shoestore.payments.gateway.port import GatewayOrder, PaymentGateway, VerificationResult
from shoestore.utils.logging import get_logger

logger = get_logger(__name__)

_SDK_ERRORS = (
    BadRequestError,
    GatewayError,
    ServerError,
    requests.RequestException,
)


class RazorpayGateway(PaymentGateway):
    """Production Razorpay adapter."""

    def __init__(self, key_id: str, key_secret: str, client: razorpay.Client | None = None) -> None:
        if not key_id or not key_secret:
            raise ValueError("RAZORPAY_KEY_ID and RAZORPAY_KEY_SECRET must both be set")
        self.key_id = key_id
        self.client = client or razorpay.Client(auth=(key_id, key_secret))

    def create_order(self, amount_minor: int, currency: str, receipt: str) -> GatewayOrder:
        try:
            response = self.client.order.create(
                data={
                    "amount": amount_minor,
                    "currency": currency,
                    "receipt": receipt[:40],
                    "payment_capture": 1,
                }
            )
        except _SDK_ERRORS as exc:
            logger.error("razorpay_order_failed", receipt=receipt, error=str(exc))
            return GatewayOrder(success=False, failure_reason=str(exc) or exc.__class__.__name__)

        return GatewayOrder(
            success=True,
            order_handle=response["id"],
            amount_minor=response.get("amount", amount_minor),
            currency=response.get("currency", currency),
        )

    def verify_payment(
        self,
        order_handle: str,
        payment_id: str,
        signature: str,
        amount_minor: int,
    ) -> VerificationResult:
        try:
            self.client.utility.verify_payment_signature(
                {
                    "razorpay_order_id": order_handle,
                    "razorpay_payment_id": payment_id,
                    "razorpay_signature": signature,
                }
            )
        except SignatureVerificationError:
            return VerificationResult(verified=False, failure_reason="Signature mismatch")

        try:
            payment = self.client.payment.fetch(payment_id)
        except _SDK_ERRORS as exc:
            logger.error("razorpay_payment_fetch_failed", payment_id=payment_id, error=str(exc))
            return VerificationResult(verified=False, failure_reason="Could not confirm payment with gateway")

        if payment.get("order_id") != order_handle:
            return VerificationResult(verified=False, failure_reason="Payment belongs to a different order")
        if int(payment.get("amount", -1)) != amount_minor:
            return VerificationResult(verified=False, failure_reason="Paid amount does not match order total")
        return VerificationResult(verified=True)
