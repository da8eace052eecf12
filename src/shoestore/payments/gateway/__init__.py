"""Payment gateway factory.

Provides get_gateway() / set_gateway() to swap implementations:
- FakeGateway for development and testing
- RazorpayGateway when PAYMENT_GATEWAY=razorpay
"""

from shoestore import settings
from shoestore.payments.gateway.fake_adapter import FakeGateway
from shoestore.payments.gateway.port import PaymentGateway

_current_gateway: PaymentGateway | None = None


def _build_default() -> PaymentGateway:
    if settings.payment_gateway_name() == "razorpay":
        from shoestore.payments.gateway.razorpay_adapter import RazorpayGateway

        return RazorpayGateway(settings.razorpay_key_id(), settings.razorpay_key_secret())
    return FakeGateway()


def get_gateway() -> PaymentGateway:
    """Return the current payment gateway, built from PAYMENT_GATEWAY on first use."""
    global _current_gateway
    if _current_gateway is None:
        _current_gateway = _build_default()
    return _current_gateway


def set_gateway(gateway: PaymentGateway) -> None:
    """Override the active payment gateway (useful for tests)."""
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    """Reset to default gateway."""
    global _current_gateway
    _current_gateway = None
