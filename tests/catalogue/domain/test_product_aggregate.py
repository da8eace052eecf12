"""Tests for the Product aggregate: creation, edits and per-size stock."""

import json

import pytest
from protean.exceptions import ValidationError

from shoestore.catalogue.events import ProductAdded, ProductDetailsUpdated, StockReleased, StockReserved
from shoestore.catalogue.product import SHOE_SIZES, Product, is_shoe_size


def _product(**overrides):
    data = {
        "name": "Court Classic",
        "brand": "Stride",
        "category": "casual",
        "price": 3499.0,
        "images": ["/uploads/court.png"],
        "sizes": [{"size": 8, "stock": 5}, {"size": 9.5, "stock": 1}],
    }
    data.update(overrides)
    product = Product.create(**data)
    return product


class TestShoeSizes:
    def test_half_sizes_from_six_to_thirteen(self):
        assert SHOE_SIZES[0] == 6
        assert SHOE_SIZES[-1] == 13
        assert 7.5 in SHOE_SIZES
        assert len(SHOE_SIZES) == 15

    @pytest.mark.parametrize("size", [5.5, 13.5, 8.25, "large", None])
    def test_rejects_non_shoe_sizes(self, size):
        assert is_shoe_size(size) is False

    def test_accepts_numeric_strings(self):
        assert is_shoe_size("9.5") is True


class TestCreate:
    def test_create_sets_fields(self):
        product = _product()
        assert product.name == "Court Classic"
        assert product.image_urls == ["/uploads/court.png"]
        assert len(product.sizes) == 2
        assert product.created_at == product.updated_at

    def test_create_raises_product_added(self):
        product = _product()
        event = product._events[-1]
        assert isinstance(event, ProductAdded)
        assert event.product_id == str(product.id)
        assert event.category == "casual"

    def test_unknown_category_is_rejected(self):
        with pytest.raises(ValidationError):
            _product(category="sandals")

    def test_price_must_be_positive(self):
        with pytest.raises(ValidationError):
            _product(price=0)

    def test_invalid_size_is_rejected(self):
        with pytest.raises(ValidationError) as exc:
            _product(sizes=[{"size": 14, "stock": 1}])
        assert "sizes" in exc.value.messages

    def test_duplicate_size_is_rejected(self):
        with pytest.raises(ValidationError):
            _product(sizes=[{"size": 8, "stock": 1}, {"size": 8.0, "stock": 2}])

    def test_negative_stock_is_rejected(self):
        with pytest.raises(ValidationError):
            _product(sizes=[{"size": 8, "stock": -1}])

    def test_images_must_be_a_json_list(self):
        with pytest.raises(ValidationError) as exc:
            Product(name="X", brand="Y", category="casual", price=10.0, images=json.dumps({"a": 1}))
        assert "images" in exc.value.messages


class TestSizes:
    def test_size_lookup_is_numeric(self):
        product = _product()
        assert product.carries_size(8)
        assert product.carries_size("9.5")
        assert not product.carries_size(10)
        assert product.size_entry(8.0).stock == 5


class TestUpdateDetails:
    def test_partial_update_keeps_other_fields(self):
        product = _product()
        product._events.clear()

        product.update_details(price=2999.0)

        assert product.price == 2999.0
        assert product.name == "Court Classic"
        event = product._events[-1]
        assert isinstance(event, ProductDetailsUpdated)
        assert json.loads(event.changed_fields) == ["price"]

    def test_none_values_are_ignored(self):
        product = _product()
        product._events.clear()

        product.update_details(name=None, brand=None)

        assert product.name == "Court Classic"
        assert product._events == []

    def test_sizes_are_replaced(self):
        product = _product()
        product.update_details(sizes=[{"size": 10, "stock": 3}])
        assert [(s.size, s.stock) for s in product.sizes] == [(10.0, 3)]

    def test_invalid_sizes_leave_product_unchanged(self):
        product = _product()
        with pytest.raises(ValidationError):
            product.update_details(sizes=[{"size": 3, "stock": 1}])
        assert len(product.sizes) == 2

    def test_images_are_replaced(self):
        product = _product()
        product.update_details(images=["/uploads/a.png", "/uploads/b.png"])
        assert product.image_urls == ["/uploads/a.png", "/uploads/b.png"]


class TestStock:
    def test_reserve_reduces_stock(self):
        product = _product()
        product._events.clear()

        product.reserve_stock(8, 3)

        assert product.size_entry(8).stock == 2
        event = product._events[-1]
        assert isinstance(event, StockReserved)
        assert event.remaining == 2

    def test_cannot_reserve_more_than_available(self):
        product = _product()
        with pytest.raises(ValidationError) as exc:
            product.reserve_stock(9.5, 2)
        assert "stock" in exc.value.messages
        assert product.size_entry(9.5).stock == 1

    def test_cannot_reserve_missing_size(self):
        with pytest.raises(ValidationError):
            _product().reserve_stock(12, 1)

    def test_release_adds_stock_back(self):
        product = _product()
        product.reserve_stock(8, 3)
        product._events.clear()

        product.release_stock(8, 3)

        assert product.size_entry(8).stock == 5
        assert isinstance(product._events[-1], StockReleased)

    def test_release_restores_a_removed_size(self):
        product = _product()
        product.update_details(sizes=[{"size": 8, "stock": 5}])

        product.release_stock(9.5, 1)

        assert product.size_entry(9.5).stock == 1
