"""FastAPI application factory for the ShoeStore API.

Every request runs inside the shoestore domain context and carries a request
id bound into the structlog context. Domain exceptions are mapped to HTTP by
Protean's exception handlers (ValidationError → 400, ObjectNotFoundError → 404).
"""

from uuid import uuid4

from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from protean.integrations.fastapi import register_exception_handlers

from shoestore import settings
from shoestore.admin.api import admin_router
from shoestore.catalogue.api import product_router
from shoestore.catalogue.images import PUBLIC_PREFIX
from shoestore.domain import shoestore
from shoestore.identity.api import router as identity_router
from shoestore.ordering.api import cart_router, order_router
from shoestore.utils.logging import add_context, clear_context, get_logger

logger = get_logger(__name__)

API_PREFIX = "/api/v1"


def create_app() -> FastAPI:
    app = FastAPI(
        title="ShoeStore API",
        description="Shoe storefront: catalogue, cart, checkout and admin console",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        """Push the domain context and bind request details for logging."""
        request_id = request.headers.get("X-Request-ID") or uuid4().hex
        clear_context()
        add_context(request_id=request_id, method=request.method, path=request.url.path)

        with shoestore.domain_context():
            response = await call_next(request)

        response.headers["X-Request-ID"] = request_id
        logger.debug("request_completed", status_code=response.status_code)
        return response

    register_exception_handlers(app)

    api = APIRouter(prefix=API_PREFIX)
    api.include_router(identity_router)
    api.include_router(product_router)
    api.include_router(cart_router)
    api.include_router(order_router)
    api.include_router(admin_router)

    @api.get("/health", tags=["health"])
    async def health():
        return {"status": "ok", "domain": shoestore.name}

    app.include_router(api)
    app.mount(PUBLIC_PREFIX, StaticFiles(directory=settings.upload_dir(), check_dir=False), name="uploads")

    return app
