"""Admin API package."""

from shoestore.admin.api.routes import admin_router

__all__ = ["admin_router"]
