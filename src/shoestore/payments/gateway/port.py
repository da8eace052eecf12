"""Payment gateway port (abstract interface).

Checkout works against a Razorpay-style gateway: the backend opens a gateway
order for the amount due, the customer pays in the gateway's widget, and the
widget hands back a payment id plus an HMAC-SHA256 signature over
``"{order_handle}|{payment_id}"`` that only the gateway secret can produce.
"""

import hashlib
import hmac
from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class GatewayOrder:
    """Result of opening a gateway order."""

    success: bool
    order_handle: str | None = None
    amount_minor: int | None = None
    currency: str | None = None
    failure_reason: str | None = None


@dataclass(frozen=True)
class VerificationResult:
    """Result of checking a payment completion callback."""

    verified: bool
    failure_reason: str | None = None


def compute_signature(secret: str, order_handle: str, payment_id: str) -> str:
    message = f"{order_handle}|{payment_id}".encode()
    return hmac.new(secret.encode(), message, hashlib.sha256).hexdigest()


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    #: Public key the checkout widget is opened with.
    key_id: str = ""

    @abstractmethod
    def create_order(self, amount_minor: int, currency: str, receipt: str) -> GatewayOrder:
        """Open a gateway order for ``amount_minor`` (paise, cents, ...)."""
        ...

    @abstractmethod
    def verify_payment(
        self,
        order_handle: str,
        payment_id: str,
        signature: str,
        amount_minor: int,
    ) -> VerificationResult:
        """Check that a payment completed against ``order_handle`` for the expected amount."""
        ...
