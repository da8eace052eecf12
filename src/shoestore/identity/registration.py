"""Account registration: commands and handler.

Passwords are hashed before a command is built, so commands only ever carry
the hash.
"""

from protean import handle
from protean.exceptions import InvalidOperationError
from protean.fields import String
from protean.utils.globals import current_domain

from shoestore import settings
from shoestore.domain import shoestore
from shoestore.identity.account import Account, AccountRole
from shoestore.identity.authentication import hash_password
from shoestore.utils.logging import get_logger

logger = get_logger(__name__)


@shoestore.command(part_of="Account")
class RegisterAccount:
    """Sign up a new customer account."""

    name: String(required=True, max_length=100)
    email: String(required=True, max_length=254)
    password_hash: String(required=True, max_length=255)


@shoestore.command(part_of="Account")
class EnsureAdminAccount:
    """Create the configured administrator unless an account already uses the email."""

    name: String(default="Admin", max_length=100)
    email: String(required=True, max_length=254)
    password_hash: String(required=True, max_length=255)


@shoestore.command_handler(part_of=Account)
class RegisterAccountHandler:
    @handle(RegisterAccount)
    def register_account(self, command):
        repo = current_domain.repository_for(Account)
        if repo.find_by_email(command.email) is not None:
            raise InvalidOperationError("Email is already registered")

        account = Account.register(
            name=command.name,
            email=command.email,
            password_hash=command.password_hash,
        )
        repo.add(account)
        logger.info("account_registered", account_id=str(account.id))
        return str(account.id)

    @handle(EnsureAdminAccount)
    def ensure_admin_account(self, command):
        repo = current_domain.repository_for(Account)
        existing = repo.find_by_email(command.email)
        if existing is not None:
            return str(existing.id)

        account = Account.register(
            name=command.name or "Admin",
            email=command.email,
            password_hash=command.password_hash,
            role=AccountRole.ADMIN.value,
        )
        repo.add(account)
        logger.info("admin_account_created", email=account.email)
        return str(account.id)


def ensure_admin() -> str:
    """Seed the administrator from ADMIN_EMAIL / ADMIN_PASSWORD. Idempotent."""
    command = EnsureAdminAccount(
        email=settings.admin_email(),
        password_hash=hash_password(settings.admin_password()),
    )
    return current_domain.process(command, asynchronous=False)
