"""Exceptions raised by the storefront client.

``Storefront`` catches these at the call site and reports them through its
Notifier; code driving the lower-level classes handles them directly.
"""


class StorefrontError(Exception):
    """Base class for all client-side errors."""

    default_message = "Something went wrong. Please try again."

    def __init__(self, message: str | None = None, status_code: int | None = None, detail=None):
        self.message = message or self.default_message
        self.status_code = status_code
        self.detail = detail
        super().__init__(self.message)


# ---------------------------------------------------------------------------
# Local input and cart state
# ---------------------------------------------------------------------------
class ValidationError(StorefrontError):
    """Input rejected locally, before any request is sent."""

    default_message = "Invalid input."


class ItemNotFoundError(StorefrontError):
    default_message = "Item not found in cart."


# ---------------------------------------------------------------------------
# Transport and HTTP status
# ---------------------------------------------------------------------------
class NetworkError(StorefrontError):
    default_message = "Network error. Please check your internet connection."


class AuthError(StorefrontError):
    """401 from the API. The stored token has already been discarded."""

    default_message = "Session expired. Please login again."


class PermissionDeniedError(StorefrontError):
    default_message = "You are not allowed to perform this action."


class NotFoundError(StorefrontError):
    default_message = "Requested resource not found."


class ConflictError(StorefrontError):
    default_message = "Conflict occurred."


class ServerError(StorefrontError):
    """The backend could not fulfil the request (5xx, or a rejection below)."""

    default_message = "Internal server error. Please try again later."


class BadRequestError(ServerError):
    """400/422: the backend rejected the request as invalid."""

    default_message = "Bad request."


# ---------------------------------------------------------------------------
# Payment
# ---------------------------------------------------------------------------
class PaymentError(StorefrontError):
    default_message = "Payment failed. Please try again."


class InvalidPaymentResponse(PaymentError):
    """The widget callback lacked the payment id, gateway order id or signature."""

    default_message = "Invalid payment response."


class PaymentVerificationError(PaymentError):
    default_message = "Payment verification failed. Please contact support."


class PaymentCancelled(PaymentError):
    default_message = "Payment cancelled. Please try again."


class PaymentFailed(PaymentError):
    """The gateway reported the payment as failed; carries its description."""


class PaymentConfigurationError(PaymentError):
    default_message = "Payment configuration missing. Please contact support."
