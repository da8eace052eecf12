"""Application tests for payment verification and admin status changes."""

import json

import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError

from shoestore.catalogue.management import DeleteProduct
from shoestore.catalogue.product import Product
from shoestore.ordering.order.creation import PlaceOrder
from shoestore.ordering.order.order import Order, OrderStatus, PaymentStatus
from shoestore.ordering.order.payment import VerifyOrderPayment
from shoestore.ordering.order.status import UpdateOrderStatus


@pytest.fixture()
def customer(make_account):
    return make_account()


@pytest.fixture()
def product_id(make_product):
    return make_product(price=2500.0)


@pytest.fixture()
def placed(customer, product_id, address):
    return current_domain.process(
        PlaceOrder(
            customer_id=str(customer.id),
            items=json.dumps([{"product_id": product_id, "size": 9, "quantity": 2}]),
            shipping_address=json.dumps(address),
            total_amount=5000.0,
        ),
        asynchronous=False,
    )


def _verify(placed, customer_id, gateway, payment_id="pay_001", signature=None, handle=None):
    handle = handle or placed["payment_order_handle"]
    return current_domain.process(
        VerifyOrderPayment(
            order_id=placed["order_id"],
            customer_id=str(customer_id),
            payment_id=payment_id,
            payment_order_id=handle,
            signature=signature or gateway.sign(handle, payment_id),
        ),
        asynchronous=False,
    )


class TestVerifyPayment:
    def test_valid_signature_marks_order_paid(self, placed, customer, gateway):
        result = _verify(placed, customer.id, gateway)

        assert result == {
            "order_id": placed["order_id"],
            "status": OrderStatus.PROCESSING.value,
            "payment_status": PaymentStatus.PAID.value,
        }
        order = current_domain.repository_for(Order).get(placed["order_id"])
        assert order.payment_id == "pay_001"
        assert order.is_paid

    def test_forged_signature_is_rejected(self, placed, customer, gateway):
        with pytest.raises(ValidationError) as exc:
            _verify(placed, customer.id, gateway, signature="0" * 64)
        assert "signature" in exc.value.messages

        order = current_domain.repository_for(Order).get(placed["order_id"])
        assert order.status == OrderStatus.PENDING.value

    def test_handle_of_another_order_is_rejected(self, placed, customer, gateway):
        with pytest.raises(ValidationError):
            _verify(placed, customer.id, gateway, handle="order_fake_someoneelse")

    def test_other_customers_order_is_not_found(self, placed, gateway, make_account):
        intruder = make_account(name="Ravi", email="ravi@example.com")
        with pytest.raises(ObjectNotFoundError):
            _verify(placed, intruder.id, gateway)

    def test_repeated_callback_is_idempotent(self, placed, customer, gateway):
        _verify(placed, customer.id, gateway)
        result = _verify(placed, customer.id, gateway)

        assert result["status"] == OrderStatus.PROCESSING.value
        assert result["payment_status"] == PaymentStatus.PAID.value

    def test_second_payment_is_rejected(self, placed, customer, gateway):
        _verify(placed, customer.id, gateway)
        with pytest.raises(ValidationError):
            _verify(placed, customer.id, gateway, payment_id="pay_002")

    def test_payment_after_admin_moved_order_to_processing(self, placed, customer, gateway):
        current_domain.process(
            UpdateOrderStatus(order_id=placed["order_id"], status="processing"), asynchronous=False
        )

        result = _verify(placed, customer.id, gateway)

        assert result["status"] == OrderStatus.PROCESSING.value
        assert result["payment_status"] == PaymentStatus.PAID.value
        order = current_domain.repository_for(Order).get(placed["order_id"])
        assert order.payment_id == "pay_001"

    def test_payment_after_admin_shipped_order_keeps_status(self, placed, customer, gateway):
        for status in ("processing", "shipped"):
            current_domain.process(UpdateOrderStatus(order_id=placed["order_id"], status=status), asynchronous=False)

        result = _verify(placed, customer.id, gateway)

        assert result["status"] == OrderStatus.SHIPPED.value
        assert result["payment_status"] == PaymentStatus.PAID.value

    def test_payment_for_cancelled_order_is_rejected(self, placed, customer, gateway):
        current_domain.process(
            UpdateOrderStatus(order_id=placed["order_id"], status="cancelled"), asynchronous=False
        )

        with pytest.raises(ValidationError):
            _verify(placed, customer.id, gateway)

        order = current_domain.repository_for(Order).get(placed["order_id"])
        assert order.payment_status == PaymentStatus.AWAITING_PAYMENT.value


class TestUpdateOrderStatus:
    def test_admin_moves_paid_order_forward(self, placed, customer, gateway):
        _verify(placed, customer.id, gateway)

        status = current_domain.process(
            UpdateOrderStatus(order_id=placed["order_id"], status="shipped"), asynchronous=False
        )

        assert status == "shipped"
        order = current_domain.repository_for(Order).get(placed["order_id"])
        assert order.status == "shipped"

    def test_invalid_transition(self, placed):
        with pytest.raises(ValidationError):
            current_domain.process(
                UpdateOrderStatus(order_id=placed["order_id"], status="delivered"), asynchronous=False
            )

    def test_cancel_releases_reserved_stock(self, placed, product_id):
        assert current_domain.repository_for(Product).get(product_id).size_entry(9).stock == 8

        current_domain.process(
            UpdateOrderStatus(order_id=placed["order_id"], status="cancelled"), asynchronous=False
        )

        assert current_domain.repository_for(Product).get(product_id).size_entry(9).stock == 10

    def test_cancel_skips_deleted_products(self, placed, product_id):
        current_domain.process(DeleteProduct(product_id=product_id), asynchronous=False)

        status = current_domain.process(
            UpdateOrderStatus(order_id=placed["order_id"], status="cancelled"), asynchronous=False
        )
        assert status == "cancelled"

    def test_unknown_order(self):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(UpdateOrderStatus(order_id="missing", status="cancelled"), asynchronous=False)
