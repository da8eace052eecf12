"""FastAPI dependencies resolving the caller from the bearer token."""

import jwt
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from shoestore.identity.account import Account
from shoestore.identity.authentication import decode_token

bearer = HTTPBearer(auto_error=False)


async def get_current_account(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer),
) -> Account:
    if credentials is None:
        raise HTTPException(status_code=401, detail="Not authenticated")

    try:
        claims = decode_token(credentials.credentials)
    except jwt.PyJWTError:
        raise HTTPException(status_code=401, detail="Invalid or expired token") from None

    try:
        return current_domain.repository_for(Account).get(claims.get("sub"))
    except ObjectNotFoundError:
        raise HTTPException(status_code=401, detail="Account no longer exists") from None


async def require_admin(account: Account = Depends(get_current_account)) -> Account:
    if not account.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return account
