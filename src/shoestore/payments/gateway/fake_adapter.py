"""Configurable fake payment gateway for development and testing.

No network calls: gateway orders get generated handles and signatures are
HMACs under a fixed test secret, so tests can produce valid callbacks with
``sign()`` and forged ones by hand. Order creation can be configured to fail.
"""

import hmac
from uuid import uuid4

from shoestore.payments.gateway.port import GatewayOrder, PaymentGateway, VerificationResult, compute_signature

FAKE_KEY_ID = "rzp_test_fake_key"
FAKE_KEY_SECRET = "fake_gateway_secret"


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self, key_id: str = FAKE_KEY_ID, key_secret: str = FAKE_KEY_SECRET) -> None:
        self.key_id = key_id
        self.key_secret = key_secret
        self.should_succeed: bool = True
        self.failure_reason: str = "Gateway unavailable"
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool, failure_reason: str = "Gateway unavailable") -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def sign(self, order_handle: str, payment_id: str) -> str:
        """Signature the real widget would return for a successful payment."""
        return compute_signature(self.key_secret, order_handle, payment_id)

    def create_order(self, amount_minor: int, currency: str, receipt: str) -> GatewayOrder:
        self.calls.append(
            {
                "method": "create_order",
                "amount_minor": amount_minor,
                "currency": currency,
                "receipt": receipt,
            }
        )

        if self.should_succeed:
            return GatewayOrder(
                success=True,
                order_handle=f"order_fake_{uuid4().hex[:14]}",
                amount_minor=amount_minor,
                currency=currency,
            )
        return GatewayOrder(success=False, failure_reason=self.failure_reason)

    def verify_payment(
        self,
        order_handle: str,
        payment_id: str,
        signature: str,
        amount_minor: int,
    ) -> VerificationResult:
        self.calls.append(
            {
                "method": "verify_payment",
                "order_handle": order_handle,
                "payment_id": payment_id,
                "amount_minor": amount_minor,
            }
        )

        expected = self.sign(order_handle, payment_id)
        if hmac.compare_digest(expected, signature or ""):
            return VerificationResult(verified=True)
        return VerificationResult(verified=False, failure_reason="Signature mismatch")
