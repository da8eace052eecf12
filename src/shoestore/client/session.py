"""Authentication state of the current storefront session."""

from shoestore.client.storage import TOKEN_KEY, LocalStore


class SessionContext:
    """The bearer token, persisted in local storage.

    ``transitions`` counts unauthenticated → authenticated changes so callers
    can run once-per-login work such as the guest cart merge.
    """

    def __init__(self, store: LocalStore) -> None:
        self.store = store
        self.user: dict | None = None
        self.transitions = 0

    @property
    def token(self) -> str | None:
        return self.store.get(TOKEN_KEY)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def begin(self, token: str, user: dict | None = None) -> None:
        was_authenticated = self.is_authenticated
        self.store.set(TOKEN_KEY, token)
        self.user = user
        if not was_authenticated:
            self.transitions += 1

    def end(self) -> None:
        self.store.remove(TOKEN_KEY)
        self.user = None
