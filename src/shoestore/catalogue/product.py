"""Product aggregate root with per-size stock."""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Integer, String, Text
from protean.utils.query import Q

from shoestore.catalogue.events import ProductAdded, ProductDetailsUpdated, StockReleased, StockReserved
from shoestore.domain import shoestore

# Half sizes from 6 to 13
SHOE_SIZES = tuple(6 + step * 0.5 for step in range(15))

_UNSET = object()


class ProductCategory(Enum):
    CASUAL = "casual"
    FORMAL = "formal"
    SPORTS = "sports"
    BOOTS = "boots"


def is_shoe_size(size) -> bool:
    try:
        return float(size) in SHOE_SIZES
    except (TypeError, ValueError):
        return False


def _validate_sizes(sizes):
    errors = []
    seen = set()
    for entry in sizes:
        size = entry.get("size")
        stock = entry.get("stock", 0)
        if not is_shoe_size(size):
            errors.append(f"Size {size} is not a valid shoe size")
            continue
        if float(size) in seen:
            errors.append(f"Size {size} is listed more than once")
        seen.add(float(size))
        if not isinstance(stock, int) or isinstance(stock, bool) or stock < 0:
            errors.append(f"Stock for size {size} must be a non-negative integer")
    if errors:
        raise ValidationError({"sizes": errors})


@shoestore.entity(part_of="Product")
class SizeStock:
    """Units on hand for one shoe size."""

    size: Float(required=True)
    stock: Integer(default=0, min_value=0)


@shoestore.aggregate
class Product:
    name: String(required=True, max_length=255)
    brand: String(required=True, max_length=100)
    description: Text()
    category: String(required=True, choices=ProductCategory)
    color: String(max_length=50)
    price: Float(required=True, min_value=0.01)
    images: Text()  # JSON array of image URLs
    sizes: HasMany(SizeStock)
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def images_must_be_a_json_list(self):
        if not self.images:
            return
        try:
            images = json.loads(self.images)
        except (json.JSONDecodeError, TypeError):
            raise ValidationError({"images": ["Images must be valid JSON"]}) from None
        if not isinstance(images, list):
            raise ValidationError({"images": ["Images must be a list of URLs"]})

    @classmethod
    def create(cls, name, brand, category, price, description=None, color=None, images=None, sizes=None):
        sizes = sizes or []
        _validate_sizes(sizes)

        now = datetime.now(UTC)
        product = cls(
            name=name,
            brand=brand,
            description=description,
            category=category,
            color=color,
            price=price,
            images=json.dumps(images or []),
            sizes=[SizeStock(size=float(s["size"]), stock=s.get("stock", 0)) for s in sizes],
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductAdded(
                product_id=str(product.id),
                name=product.name,
                category=product.category,
                price=product.price,
                added_at=now,
            )
        )
        return product

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    @property
    def image_urls(self) -> list[str]:
        return json.loads(self.images) if self.images else []

    def size_entry(self, size):
        return next((s for s in self.sizes if float(s.size) == float(size)), None)

    def carries_size(self, size) -> bool:
        return self.size_entry(size) is not None

    # -------------------------------------------------------------------
    # Admin edits
    # -------------------------------------------------------------------
    def update_details(
        self,
        name=_UNSET,
        brand=_UNSET,
        description=_UNSET,
        category=_UNSET,
        color=_UNSET,
        price=_UNSET,
        images=_UNSET,
        sizes=_UNSET,
    ):
        """Apply a partial update; arguments left unset keep their value."""
        changed = []
        for field_name, value in (
            ("name", name),
            ("brand", brand),
            ("description", description),
            ("category", category),
            ("color", color),
            ("price", price),
        ):
            if value is not _UNSET and value is not None:
                setattr(self, field_name, value)
                changed.append(field_name)

        if images is not _UNSET and images is not None:
            self.images = json.dumps(images)
            changed.append("images")

        if sizes is not _UNSET and sizes is not None:
            _validate_sizes(sizes)
            for existing in list(self.sizes):
                self.remove_sizes(existing)
            for entry in sizes:
                self.add_sizes(SizeStock(size=float(entry["size"]), stock=entry.get("stock", 0)))
            changed.append("sizes")

        if not changed:
            return

        now = datetime.now(UTC)
        self.updated_at = now
        self.raise_(
            ProductDetailsUpdated(
                product_id=str(self.id),
                changed_fields=json.dumps(changed),
                updated_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Stock
    # -------------------------------------------------------------------
    def reserve_stock(self, size, quantity):
        entry = self.size_entry(size)
        if entry is None:
            raise ValidationError({"size": [f"{self.name} is not available in size {size}"]})
        if entry.stock < quantity:
            raise ValidationError({"stock": [f"Only {entry.stock} left of {self.name} in size {size}"]})

        entry.stock -= quantity
        self.updated_at = datetime.now(UTC)
        self.raise_(
            StockReserved(
                product_id=str(self.id),
                size=float(size),
                quantity=quantity,
                remaining=entry.stock,
            )
        )

    def release_stock(self, size, quantity):
        entry = self.size_entry(size)
        if entry is None:
            # Size was removed by an admin after the order was placed
            entry = SizeStock(size=float(size), stock=0)
            self.add_sizes(entry)

        entry.stock += quantity
        self.updated_at = datetime.now(UTC)
        self.raise_(
            StockReleased(
                product_id=str(self.id),
                size=float(size),
                quantity=quantity,
                available=entry.stock,
            )
        )


@shoestore.repository(part_of=Product)
class ProductRepository:
    def listing(
        self,
        category: str | None = None,
        search: str | None = None,
        min_price: float | None = None,
        max_price: float | None = None,
        limit: int = 1000,
    ) -> list[Product]:
        """Newest first. ``search`` matches name or brand, ignoring case."""
        query = self._dao.query
        if category:
            query = query.filter(category=category)
        if search and search.strip():
            term = search.strip()
            query = query.filter(Q(name__icontains=term) | Q(brand__icontains=term))
        if min_price is not None:
            query = query.filter(price__gte=min_price)
        if max_price is not None:
            query = query.filter(price__lte=max_price)
        return query.order_by("-created_at").limit(limit).all().items
