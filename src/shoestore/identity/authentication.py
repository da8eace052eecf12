"""Password hashing and bearer-token issue/verification."""

from datetime import UTC, datetime, timedelta

import jwt
from passlib.context import CryptContext
from protean.utils.globals import current_domain

from shoestore import settings
from shoestore.identity.account import Account
from shoestore.utils.logging import get_logger

logger = get_logger(__name__)

ALGORITHM = "HS256"

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


def issue_token(account: Account) -> str:
    now = datetime.now(UTC)
    claims = {
        "sub": str(account.id),
        "role": account.role,
        "iat": now,
        "exp": now + timedelta(hours=settings.token_ttl_hours()),
    }
    return jwt.encode(claims, settings.jwt_secret(), algorithm=ALGORITHM)


def decode_token(token: str) -> dict:
    """Return the token claims. Raises ``jwt.PyJWTError`` when invalid or expired."""
    return jwt.decode(token, settings.jwt_secret(), algorithms=[ALGORITHM])


def authenticate(email: str, password: str) -> Account | None:
    account = current_domain.repository_for(Account).find_by_email(email)
    if account is None or not verify_password(password, account.password_hash):
        logger.info("login_rejected", email=email)
        return None
    return account
