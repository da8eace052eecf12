import pytest
from fastapi.testclient import TestClient

from shoestore.client import ClientConfig, RecordingNotifier, Storefront
from shoestore.client.storage import LocalStore
from shoestore.payments.gateway.fake_adapter import FAKE_KEY_ID
from shoestore.web import API_PREFIX, create_app

BASE_URL = f"http://testserver{API_PREFIX}"


@pytest.fixture()
def api_client():
    """The real API served in-process; used as the storefront's httpx client."""
    return TestClient(create_app(), base_url=BASE_URL)


@pytest.fixture()
def config():
    return ClientConfig(api_url=BASE_URL, payment_key_id=FAKE_KEY_ID)


@pytest.fixture()
def notifier():
    return RecordingNotifier()


@pytest.fixture()
def storefront(config, notifier, api_client):
    return Storefront(config=config, notifier=notifier, http=api_client, store=LocalStore())


@pytest.fixture()
def shopper(make_account):
    return make_account(name="Asha Rao", email="asha@example.com", password="secret123")


@pytest.fixture()
def shoe(make_product, api_client):
    """A product as the storefront sees it."""
    product_id = make_product(price=2500.0)
    return api_client.get(f"/products/{product_id}").json()
