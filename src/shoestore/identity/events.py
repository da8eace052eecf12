"""Domain events for the Account aggregate."""

from protean.fields import DateTime, Identifier, String

from shoestore.domain import shoestore


@shoestore.event(part_of="Account")
class AccountRegistered:
    """A new storefront account was created."""

    __version__ = 1

    account_id: Identifier(required=True)
    email: String(required=True)
    role: String(required=True)
    registered_at: DateTime(required=True)
