"""Integration tests for the order endpoints via TestClient."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from protean.integrations.fastapi import register_exception_handlers

from shoestore.ordering.api import cart_router, order_router


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(order_router)
    app.include_router(cart_router)
    register_exception_handlers(app)
    return TestClient(app)


@pytest.fixture()
def customer(make_account):
    return make_account()


@pytest.fixture()
def headers(customer, auth_headers):
    return auth_headers(customer)


@pytest.fixture()
def product_id(make_product):
    return make_product(price=2500.0)


def _place(client, headers, product_id, address, quantity=1, total=None):
    return client.post(
        "/orders",
        json={
            "items": [{"product_id": product_id, "size": 9, "quantity": quantity, "unit_price": 2500.0}],
            "shipping_address": address,
            "total_amount": 2500.0 * quantity if total is None else total,
        },
        headers=headers,
    )


def _verify(client, headers, placed, gateway, payment_id="pay_001"):
    handle = placed["payment_order_handle"]
    return client.post(
        f"/orders/{placed['order_id']}/verify",
        json={
            "payment_id": payment_id,
            "payment_order_id": handle,
            "signature": gateway.sign(handle, payment_id),
        },
        headers=headers,
    )


class TestPlaceOrderEndpoint:
    def test_place_order(self, client, headers, product_id, address):
        response = _place(client, headers, product_id, address, quantity=2)
        assert response.status_code == 201
        data = response.json()
        assert data["amount"] == 500000
        assert data["currency"] == "INR"
        assert data["payment_order_handle"].startswith("order_fake_")

    def test_requires_login(self, client, product_id, address):
        assert _place(client, {}, product_id, address).status_code == 401

    def test_empty_items_is_rejected(self, client, headers, address):
        response = client.post(
            "/orders", json={"items": [], "shipping_address": address, "total_amount": 0}, headers=headers
        )
        assert response.status_code == 422

    def test_missing_address_field_is_rejected(self, client, headers, product_id, address):
        del address["zip_code"]
        assert _place(client, headers, product_id, address).status_code == 422

    def test_total_mismatch_is_a_bad_request(self, client, headers, product_id, address):
        response = _place(client, headers, product_id, address, total=100.0)
        assert response.status_code == 400

    def test_gateway_failure_is_a_bad_request(self, client, headers, product_id, address, gateway):
        gateway.configure(should_succeed=False, failure_reason="Gateway down")
        response = _place(client, headers, product_id, address)
        assert response.status_code == 400


class TestVerifyEndpoint:
    def test_verify_payment(self, client, headers, product_id, address, gateway):
        placed = _place(client, headers, product_id, address).json()

        response = _verify(client, headers, placed, gateway)

        assert response.status_code == 200
        assert response.json() == {
            "status": "processing",
            "order_id": placed["order_id"],
            "payment_status": "paid",
        }

    def test_forged_signature(self, client, headers, product_id, address):
        placed = _place(client, headers, product_id, address).json()
        response = client.post(
            f"/orders/{placed['order_id']}/verify",
            json={"payment_id": "pay_001", "payment_order_id": placed["payment_order_handle"], "signature": "bad"},
            headers=headers,
        )
        assert response.status_code == 400

    def test_other_customer_gets_not_found(
        self, client, headers, product_id, address, gateway, make_account, auth_headers
    ):
        placed = _place(client, headers, product_id, address).json()
        intruder = auth_headers(make_account(name="Ravi", email="ravi@example.com"))
        assert _verify(client, intruder, placed, gateway).status_code == 404

    def test_unknown_order(self, client, headers):
        response = client.post(
            "/orders/missing/verify",
            json={"payment_id": "pay_001", "payment_order_id": "order_fake_x", "signature": "sig"},
            headers=headers,
        )
        assert response.status_code == 404


class TestReadOrders:
    def test_my_orders_newest_first(self, client, headers, product_id, address):
        first = _place(client, headers, product_id, address).json()["order_id"]
        second = _place(client, headers, product_id, address).json()["order_id"]

        data = client.get("/orders/my-orders", headers=headers).json()
        assert [o["id"] for o in data] == [second, first]
        assert data[0]["shipping_address"]["city"] == "Bengaluru"
        assert data[0]["items"][0]["name"] == "Tempo Runner"

    def test_my_orders_only_lists_own_orders(
        self, client, headers, product_id, address, make_account, auth_headers
    ):
        _place(client, headers, product_id, address)
        other = auth_headers(make_account(name="Ravi", email="ravi@example.com"))
        assert client.get("/orders/my-orders", headers=other).json() == []

    def test_get_own_order(self, client, headers, product_id, address):
        order_id = _place(client, headers, product_id, address).json()["order_id"]
        response = client.get(f"/orders/{order_id}", headers=headers)
        assert response.status_code == 200
        assert response.json()["status"] == "pending"

    def test_other_customer_cannot_read_order(
        self, client, headers, product_id, address, make_account, auth_headers
    ):
        order_id = _place(client, headers, product_id, address).json()["order_id"]
        other = auth_headers(make_account(name="Ravi", email="ravi@example.com"))
        assert client.get(f"/orders/{order_id}", headers=other).status_code == 404

    def test_admin_can_read_any_order(self, client, headers, product_id, address, make_account, auth_headers):
        order_id = _place(client, headers, product_id, address).json()["order_id"]
        admin = auth_headers(make_account(name="Admin", email="admin@shoestore.com", admin=True))
        assert client.get(f"/orders/{order_id}", headers=admin).status_code == 200
