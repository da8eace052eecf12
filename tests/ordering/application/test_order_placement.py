"""Application tests for placing an order."""

import json

import pytest
from protean import current_domain
from protean.exceptions import ValidationError

from shoestore.catalogue.management import UpdateProduct
from shoestore.catalogue.product import Product
from shoestore.ordering.order.creation import PlaceOrder
from shoestore.ordering.order.order import Order, OrderStatus, PaymentStatus


@pytest.fixture()
def customer(make_account):
    return make_account()


@pytest.fixture()
def product_id(make_product):
    return make_product(price=2500.0)


def _place(customer, address, lines, total):
    return current_domain.process(
        PlaceOrder(
            customer_id=str(customer.id),
            items=json.dumps(lines),
            shipping_address=json.dumps(address),
            total_amount=total,
        ),
        asynchronous=False,
    )


class TestPlaceOrder:
    def test_place_order(self, customer, product_id, address, gateway):
        result = _place(customer, address, [{"product_id": product_id, "size": 9, "quantity": 2}], 5000.0)

        assert result["amount"] == 500000
        assert result["currency"] == "INR"
        assert result["key_id"] == gateway.key_id
        assert result["payment_order_handle"].startswith("order_fake_")

        order = current_domain.repository_for(Order).get(result["order_id"])
        assert order.status == OrderStatus.PENDING.value
        assert order.payment_status == PaymentStatus.AWAITING_PAYMENT.value
        assert order.payment_order_handle == result["payment_order_handle"]
        assert order.customer_name == "Asha Rao"
        assert order.customer_email == "asha@example.com"
        assert order.items[0].name == "Tempo Runner"
        assert order.items[0].image == "/uploads/tempo.png"

    def test_gateway_receives_minor_units_and_receipt(self, customer, product_id, address, gateway):
        result = _place(customer, address, [{"product_id": product_id, "size": 9, "quantity": 1}], 2500.0)

        call = gateway.calls[-1]
        assert call["method"] == "create_order"
        assert call["amount_minor"] == 250000
        assert call["receipt"] == result["order_id"]

    def test_stock_is_reserved(self, customer, product_id, address):
        _place(customer, address, [{"product_id": product_id, "size": 9, "quantity": 3}], 7500.0)

        product = current_domain.repository_for(Product).get(product_id)
        assert product.size_entry(9).stock == 7

    def test_catalogue_price_is_authoritative(self, customer, product_id, address):
        result = _place(
            customer,
            address,
            [{"product_id": product_id, "size": 9, "quantity": 1, "unit_price": 2500.004}],
            2500.0,
        )
        order = current_domain.repository_for(Order).get(result["order_id"])
        assert order.items[0].unit_price == 2500.0

    def test_later_catalogue_edits_leave_order_untouched(self, customer, product_id, address):
        result = _place(customer, address, [{"product_id": product_id, "size": 9, "quantity": 2}], 5000.0)

        current_domain.process(
            UpdateProduct(product_id=product_id, name="Tempo Runner 2", price=3100.0), asynchronous=False
        )

        order = current_domain.repository_for(Order).get(result["order_id"])
        assert order.items[0].unit_price == 2500.0
        assert order.items[0].name == "Tempo Runner"
        assert order.total_amount == 5000.0
        assert current_domain.repository_for(Product).get(product_id).price == 3100.0


class TestRejectedOrders:
    def test_empty_items(self, customer, address):
        with pytest.raises(ValidationError):
            _place(customer, address, [], 0.0)

    def test_total_mismatch(self, customer, product_id, address):
        with pytest.raises(ValidationError) as exc:
            _place(customer, address, [{"product_id": product_id, "size": 9, "quantity": 2}], 4000.0)
        assert "total_amount" in exc.value.messages

    def test_stale_price(self, customer, product_id, address):
        with pytest.raises(ValidationError) as exc:
            _place(
                customer,
                address,
                [{"product_id": product_id, "size": 9, "quantity": 1, "unit_price": 2000.0}],
                2000.0,
            )
        assert "items" in exc.value.messages

    def test_unknown_product(self, customer, address):
        with pytest.raises(ValidationError):
            _place(customer, address, [{"product_id": "missing", "size": 9, "quantity": 1}], 100.0)

    def test_size_not_carried(self, customer, product_id, address):
        with pytest.raises(ValidationError):
            _place(customer, address, [{"product_id": product_id, "size": 12, "quantity": 1}], 2500.0)

    def test_not_enough_stock_across_lines(self, customer, product_id, address):
        lines = [
            {"product_id": product_id, "size": 9.5, "quantity": 1},
            {"product_id": product_id, "size": 9.5, "quantity": 2},
        ]
        with pytest.raises(ValidationError) as exc:
            _place(customer, address, lines, 7500.0)
        assert "stock" in exc.value.messages

    def test_gateway_failure_persists_nothing(self, customer, product_id, address, gateway):
        gateway.configure(should_succeed=False, failure_reason="Gateway down")

        with pytest.raises(ValidationError) as exc:
            _place(customer, address, [{"product_id": product_id, "size": 9, "quantity": 1}], 2500.0)

        assert "Gateway down" in exc.value.messages["payment"][0]
        assert current_domain.repository_for(Order).scan(10) == []
        product = current_domain.repository_for(Product).get(product_id)
        assert product.size_entry(9).stock == 10
