"""FastAPI routes for the admin console.

Every route requires an administrator token.
"""

import json
from datetime import date

from fastapi import APIRouter, Depends, File, UploadFile
from protean.utils.globals import current_domain

from shoestore.admin.api.schemas import (
    DashboardResponse,
    OrderSummaryResponse,
    TopProductResponse,
    UpdateOrderStatusRequest,
    UploadResponse,
)
from shoestore.admin.dashboard import compute_dashboard, search_orders
from shoestore.catalogue.api.routes import product_response
from shoestore.catalogue.api.schemas import (
    CreateProductRequest,
    ProductIdResponse,
    ProductResponse,
    StatusResponse,
    UpdateProductRequest,
)
from shoestore.catalogue.images import store_image
from shoestore.catalogue.management import CreateProduct, DeleteProduct, UpdateProduct
from shoestore.catalogue.product import Product
from shoestore.identity.api.dependencies import require_admin
from shoestore.ordering.api.routes import order_response
from shoestore.ordering.api.schemas import OrderResponse
from shoestore.ordering.order.order import Order
from shoestore.ordering.order.status import UpdateOrderStatus

admin_router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


def _summary(order: Order) -> OrderSummaryResponse:
    return OrderSummaryResponse(
        id=str(order.id),
        customer_name=order.customer_name,
        customer_email=order.customer_email,
        total_amount=order.total_amount,
        status=order.status,
        payment_status=order.payment_status,
        created_at=order.created_at,
    )


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------
@admin_router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(
    status: str | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
) -> DashboardResponse:
    metrics = compute_dashboard(status=status, start_date=start_date, end_date=end_date)
    return DashboardResponse(
        total_revenue=metrics["total_revenue"],
        total_orders=metrics["total_orders"],
        total_users=metrics["total_users"],
        pending_orders=metrics["pending_orders"],
        recent_orders=[_summary(order) for order in metrics["recent_orders"]],
        top_products=[TopProductResponse(**entry) for entry in metrics["top_products"]],
    )


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
@admin_router.get("/orders", response_model=list[OrderResponse])
async def list_orders(
    status: str | None = None,
    search: str | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
) -> list[OrderResponse]:
    orders = search_orders(status=status, search=search, start_date=start_date, end_date=end_date)
    return [order_response(order) for order in orders]


@admin_router.put("/orders/{order_id}/status", response_model=OrderResponse)
async def update_order_status(order_id: str, body: UpdateOrderStatusRequest) -> OrderResponse:
    current_domain.process(UpdateOrderStatus(order_id=order_id, status=body.status), asynchronous=False)
    return order_response(current_domain.repository_for(Order).get(order_id))


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------
@admin_router.get("/products", response_model=list[ProductResponse])
async def list_products(
    category: str | None = None,
    search: str | None = None,
    min_price: float | None = None,
    max_price: float | None = None,
) -> list[ProductResponse]:
    products = current_domain.repository_for(Product).listing(
        category=category, search=search, min_price=min_price, max_price=max_price
    )
    return [product_response(p) for p in products]


@admin_router.post("/products", status_code=201, response_model=ProductIdResponse)
async def create_product(body: CreateProductRequest) -> ProductIdResponse:
    command = CreateProduct(
        name=body.name,
        brand=body.brand,
        description=body.description,
        category=body.category,
        color=body.color,
        price=body.price,
        images=json.dumps(body.images),
        sizes=json.dumps([s.model_dump() for s in body.sizes]),
    )
    result = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=result)


@admin_router.put("/products/{product_id}", response_model=ProductResponse)
async def update_product(product_id: str, body: UpdateProductRequest) -> ProductResponse:
    command = UpdateProduct(
        product_id=product_id,
        name=body.name,
        brand=body.brand,
        description=body.description,
        category=body.category,
        color=body.color,
        price=body.price,
        images=json.dumps(body.images) if body.images is not None else None,
        sizes=json.dumps([s.model_dump() for s in body.sizes]) if body.sizes is not None else None,
    )
    current_domain.process(command, asynchronous=False)
    return product_response(current_domain.repository_for(Product).get(product_id))


@admin_router.delete("/products/{product_id}", response_model=StatusResponse)
async def delete_product(product_id: str) -> StatusResponse:
    current_domain.process(DeleteProduct(product_id=product_id), asynchronous=False)
    return StatusResponse()


@admin_router.post("/upload", response_model=UploadResponse)
async def upload_images(files: list[UploadFile] = File(...)) -> UploadResponse:
    urls = []
    for upload in files:
        content = await upload.read()
        urls.append(store_image(upload.filename, content))
    return UploadResponse(urls=urls)
