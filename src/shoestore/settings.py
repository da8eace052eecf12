"""Environment-driven settings for the ShoeStore backend.

Values are read on every call so tests can override them with monkeypatch.
"""

import os
from pathlib import Path

_DEV_JWT_SECRET = "shoestore-dev-secret-change-me"


def environment() -> str:
    return os.getenv("PROTEAN_ENV", "development").lower()


def is_production() -> bool:
    return environment() == "production"


def jwt_secret() -> str:
    secret = os.getenv("JWT_SECRET")
    if not secret:
        if is_production():
            raise RuntimeError("JWT_SECRET must be set in production")
        return _DEV_JWT_SECRET
    return secret


def token_ttl_hours() -> int:
    return int(os.getenv("TOKEN_TTL_HOURS", "24"))


def payment_gateway_name() -> str:
    """Either ``fake`` or ``razorpay``."""
    return os.getenv("PAYMENT_GATEWAY", "fake").lower()


def razorpay_key_id() -> str:
    return os.getenv("RAZORPAY_KEY_ID", "")


def razorpay_key_secret() -> str:
    return os.getenv("RAZORPAY_KEY_SECRET", "")


def payment_currency() -> str:
    return os.getenv("PAYMENT_CURRENCY", "INR").upper()


def admin_email() -> str:
    return os.getenv("ADMIN_EMAIL", "admin@shoestore.com").strip().lower()


def admin_password() -> str:
    return os.getenv("ADMIN_PASSWORD", "admin123")


def upload_dir() -> Path:
    return Path(os.getenv("UPLOAD_DIR", "uploads"))


def cors_origins() -> list[str]:
    raw = os.getenv("CORS_ORIGINS", "*")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]
