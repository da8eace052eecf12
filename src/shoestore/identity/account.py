"""Account aggregate: storefront customers and administrators."""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, String

from shoestore.domain import shoestore
from shoestore.identity.events import AccountRegistered


class AccountRole(Enum):
    CUSTOMER = "customer"
    ADMIN = "admin"


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


@shoestore.aggregate
class Account:
    """A person who can sign in to the storefront.

    Emails are stored lower-cased so lookups are case-insensitive. Only the
    password hash is ever held on the aggregate.
    """

    name: String(required=True, max_length=100)
    email: String(required=True, max_length=254)
    password_hash: String(required=True, max_length=255)
    role: String(choices=AccountRole, default=AccountRole.CUSTOMER.value)
    created_at: DateTime()

    @invariant.post
    def email_must_look_like_an_address(self):
        if self.email and "@" not in self.email:
            raise ValidationError({"email": ["Email must be a valid address"]})

    @classmethod
    def register(cls, name, email, password_hash, role=AccountRole.CUSTOMER.value):
        account = cls(
            name=name.strip(),
            email=normalize_email(email),
            password_hash=password_hash,
            role=role,
            created_at=datetime.now(UTC),
        )
        account.raise_(
            AccountRegistered(
                account_id=str(account.id),
                email=account.email,
                role=account.role,
                registered_at=account.created_at,
            )
        )
        return account

    @property
    def is_admin(self) -> bool:
        return self.role == AccountRole.ADMIN.value


@shoestore.repository(part_of=Account)
class AccountRepository:
    def find_by_email(self, email: str) -> Account | None:
        return self._dao.query.filter(email=normalize_email(email)).all().first

    def count_by_role(self, role: str) -> int:
        return self._dao.query.filter(role=role).all().total
