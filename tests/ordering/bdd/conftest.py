"""Shared BDD fixtures and step definitions for checkout and fulfilment."""

import json

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then

from shoestore.catalogue.product import Product
from shoestore.ordering.order.creation import PlaceOrder
from shoestore.ordering.order.order import Order
from shoestore.ordering.order.payment import VerifyOrderPayment


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


@pytest.fixture()
def place_order(customer, product_id, address):
    """Place a single-line order for the customer and product of the scenario."""

    def _place(quantity, size, total):
        return current_domain.process(
            PlaceOrder(
                customer_id=str(customer.id),
                items=json.dumps([{"product_id": product_id, "size": size, "quantity": quantity}]),
                shipping_address=json.dumps(address),
                total_amount=total,
            ),
            asynchronous=False,
        )

    return _place


@pytest.fixture()
def verify_payment(customer):
    """Report a widget callback for the placed order."""

    def _verify(placed, payment_id, signature):
        return current_domain.process(
            VerifyOrderPayment(
                order_id=placed["order_id"],
                customer_id=str(customer.id),
                payment_id=payment_id,
                payment_order_id=placed["payment_order_handle"],
                signature=signature,
            ),
            asynchronous=False,
        )

    return _verify


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a customer "{email}"'), target_fixture="customer")
def a_customer(make_account, email):
    return make_account(email=email)


@given(
    parsers.cfparse('a product "{name}" priced {price:f} with {stock:d} pairs in size {size:g}'),
    target_fixture="product_id",
)
def a_product(make_product, name, price, stock, size):
    return make_product(name=name, price=price, sizes=[{"size": size, "stock": stock}])


@given(
    parsers.cfparse("the customer ordered {quantity:d} {unit:w} in size {size:g} for a total of {total:f}"),
    target_fixture="placed",
)
def customer_ordered(place_order, quantity, size, total):
    return place_order(quantity, size, total)


@given(parsers.cfparse('the customer completed the payment "{payment_id}"'))
def customer_completed_payment(verify_payment, placed, gateway, payment_id):
    verify_payment(placed, payment_id, gateway.sign(placed["payment_order_handle"], payment_id))


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order is "{status}" and "{payment_status}"'))
def order_is(placed, status, payment_status):
    order = current_domain.repository_for(Order).get(placed["order_id"])
    assert order.status == status
    assert order.payment_status == payment_status


@then(parsers.cfparse("{stock:d} pairs remain in size {size:g}"))
def pairs_remain(product_id, stock, size):
    product = current_domain.repository_for(Product).get(product_id)
    assert product.size_entry(size).stock == stock


@then("the order is rejected")
def order_rejected(error):
    assert isinstance(error["exc"], ValidationError)
