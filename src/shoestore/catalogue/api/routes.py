"""Public catalogue endpoints: product listing and detail."""

from fastapi import APIRouter
from protean.utils.globals import current_domain

from shoestore.catalogue.api.schemas import ProductResponse, SizeStockSchema
from shoestore.catalogue.product import Product

product_router = APIRouter(prefix="/products", tags=["products"])


def product_response(product: Product) -> ProductResponse:
    return ProductResponse(
        id=str(product.id),
        name=product.name,
        brand=product.brand,
        description=product.description,
        category=product.category,
        color=product.color,
        price=product.price,
        images=product.image_urls,
        sizes=sorted(
            (SizeStockSchema(size=s.size, stock=s.stock) for s in product.sizes),
            key=lambda s: s.size,
        ),
        created_at=product.created_at,
        updated_at=product.updated_at,
    )


@product_router.get("", response_model=list[ProductResponse])
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


@product_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str) -> ProductResponse:
    product = current_domain.repository_for(Product).get(product_id)
    return product_response(product)
