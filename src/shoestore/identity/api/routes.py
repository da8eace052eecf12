"""FastAPI endpoints for sign-up, login and profile."""

from fastapi import APIRouter, Depends, HTTPException
from protean.exceptions import InvalidOperationError
from protean.utils.globals import current_domain

from shoestore.identity.account import Account
from shoestore.identity.api.dependencies import get_current_account
from shoestore.identity.api.schemas import AuthResponse, LoginRequest, SignupRequest, UserResponse
from shoestore.identity.authentication import authenticate, hash_password, issue_token
from shoestore.identity.registration import RegisterAccount

router = APIRouter(prefix="/auth", tags=["auth"])


def _user(account: Account) -> UserResponse:
    return UserResponse(
        id=str(account.id),
        name=account.name,
        email=account.email,
        role=account.role,
    )


@router.post("/signup", status_code=201, response_model=AuthResponse)
async def signup(body: SignupRequest) -> AuthResponse:
    command = RegisterAccount(
        name=body.name,
        email=body.email,
        password_hash=hash_password(body.password),
    )
    try:
        account_id = current_domain.process(command, asynchronous=False)
    except InvalidOperationError as exc:
        raise HTTPException(status_code=409, detail="Email is already registered") from exc

    account = current_domain.repository_for(Account).get(account_id)
    return AuthResponse(token=issue_token(account), user=_user(account))


@router.post("/login", response_model=AuthResponse)
async def login(body: LoginRequest) -> AuthResponse:
    account = authenticate(body.email, body.password)
    if account is None:
        raise HTTPException(status_code=401, detail="Invalid email or password")
    return AuthResponse(token=issue_token(account), user=_user(account))


@router.get("/profile", response_model=UserResponse)
async def profile(account: Account = Depends(get_current_account)) -> UserResponse:
    return _user(account)
