import json
import os
from pathlib import Path

import pytest
from protean.integrations.pytest import DomainFixture


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Select the config environment before the domain is imported."""
    os.environ["PROTEAN_ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)
        elif "/client/" in test_path:
            item.add_marker(pytest.mark.client)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session")
def shoestore_bed():
    from shoestore.domain import shoestore

    bed = DomainFixture(shoestore)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(shoestore_bed):
    """Run every test inside the domain context, with empty stores afterwards."""
    with shoestore_bed.domain_context():
        yield

        from protean import current_domain

        for _, provider in current_domain.providers.items():
            provider._data_reset()

        current_domain.event_store.store._data_reset()


@pytest.fixture(autouse=True)
def gateway():
    """A fresh fake payment gateway per test."""
    from shoestore.payments.gateway import reset_gateway, set_gateway
    from shoestore.payments.gateway.fake_adapter import FakeGateway

    fake = FakeGateway()
    set_gateway(fake)
    yield fake
    reset_gateway()


@pytest.fixture(autouse=True)
def upload_dir(tmp_path, monkeypatch):
    directory = tmp_path / "uploads"
    monkeypatch.setenv("UPLOAD_DIR", str(directory))
    return directory


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------
@pytest.fixture()
def make_product():
    """Create a catalogue product and return its id."""
    from protean import current_domain

    from shoestore.catalogue.management import CreateProduct

    def _make(**overrides):
        data = {
            "name": "Tempo Runner",
            "brand": "Velo",
            "description": "Cushioned road running shoe",
            "category": "sports",
            "color": "Blue",
            "price": 2500.0,
            "images": ["/uploads/tempo.png"],
            "sizes": [{"size": 8, "stock": 10}, {"size": 9, "stock": 10}, {"size": 9.5, "stock": 2}],
        }
        data.update(overrides)
        data["images"] = json.dumps(data["images"])
        data["sizes"] = json.dumps(data["sizes"])
        return current_domain.process(CreateProduct(**data), asynchronous=False)

    return _make


@pytest.fixture()
def make_account():
    """Register an account and return it."""
    from protean import current_domain

    from shoestore.identity.account import Account
    from shoestore.identity.authentication import hash_password
    from shoestore.identity.registration import EnsureAdminAccount, RegisterAccount

    def _make(name="Asha Rao", email="asha@example.com", password="secret123", admin=False):
        command_class = EnsureAdminAccount if admin else RegisterAccount
        account_id = current_domain.process(
            command_class(name=name, email=email, password_hash=hash_password(password)),
            asynchronous=False,
        )
        return current_domain.repository_for(Account).get(account_id)

    return _make


@pytest.fixture()
def auth_headers():
    """Bearer headers for an account."""
    from shoestore.identity.authentication import issue_token

    def _headers(account):
        return {"Authorization": f"Bearer {issue_token(account)}"}

    return _headers


@pytest.fixture()
def address():
    return {
        "street": "12 MG Road",
        "city": "Bengaluru",
        "state": "KA",
        "zip_code": "560001",
        "phone": "9876543210",
    }
