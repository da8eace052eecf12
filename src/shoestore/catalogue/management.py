"""Product management: admin commands and handler."""

import json

from protean import handle
from protean.fields import Float, Identifier, String, Text
from protean.utils.globals import current_domain

from shoestore.catalogue.product import Product
from shoestore.domain import shoestore
from shoestore.utils.logging import get_logger

logger = get_logger(__name__)


def _json(value):
    return json.loads(value) if isinstance(value, str) else value


@shoestore.command(part_of="Product")
class CreateProduct:
    name: String(required=True, max_length=255)
    brand: String(required=True, max_length=100)
    description: Text()
    category: String(required=True, max_length=20)
    color: String(max_length=50)
    price: Float(required=True)
    images: Text()  # JSON: list of URLs
    sizes: Text()  # JSON: list of {size, stock}


@shoestore.command(part_of="Product")
class UpdateProduct:
    """Partial update; omitted fields are left as they are."""

    product_id: Identifier(required=True)
    name: String(max_length=255)
    brand: String(max_length=100)
    description: Text()
    category: String(max_length=20)
    color: String(max_length=50)
    price: Float()
    images: Text()
    sizes: Text()


@shoestore.command(part_of="Product")
class DeleteProduct:
    product_id: Identifier(required=True)


@shoestore.command_handler(part_of=Product)
class ManageProductHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        product = Product.create(
            name=command.name,
            brand=command.brand,
            description=command.description,
            category=command.category,
            color=command.color,
            price=command.price,
            images=_json(command.images) if command.images else [],
            sizes=_json(command.sizes) if command.sizes else [],
        )
        current_domain.repository_for(Product).add(product)
        logger.info("product_created", product_id=str(product.id))
        return str(product.id)

    @handle(UpdateProduct)
    def update_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.update_details(
            name=command.name,
            brand=command.brand,
            description=command.description,
            category=command.category,
            color=command.color,
            price=command.price,
            images=_json(command.images) if command.images is not None else None,
            sizes=_json(command.sizes) if command.sizes is not None else None,
        )
        repo.add(product)

    @handle(DeleteProduct)
    def delete_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        repo._dao.delete(product)
        logger.info("product_deleted", product_id=str(command.product_id))
