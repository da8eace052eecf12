"""Catalogue API package."""

from shoestore.catalogue.api.routes import product_router

__all__ = ["product_router"]
