"""Identity API package."""

from shoestore.identity.api.routes import router

__all__ = ["router"]
