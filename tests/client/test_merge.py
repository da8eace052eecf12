"""Tests for merging the guest cart into the server cart at sign-in."""

import pytest

from shoestore.client.storage import GUEST_CART_KEY


@pytest.fixture()
def guest_lines(storefront, shoe):
    storefront.add_to_cart(shoe, 9, 2)
    storefront.add_to_cart(shoe, 8, 1)
    storefront.notifier.messages.clear()
    return storefront


def _server_lines(storefront):
    return sorted((item["size"], item["quantity"]) for item in storefront.cart.items)


class TestMergeOnLogin:
    def test_guest_lines_move_to_server(self, guest_lines, shopper):
        assert guest_lines.login("asha@example.com", "secret123") is True

        assert _server_lines(guest_lines) == [(8.0, 1), (9.0, 2)]
        assert guest_lines.store.get(GUEST_CART_KEY) is None
        assert guest_lines.last_merge.merged == 2
        assert "Guest cart items merged successfully" in guest_lines.notifier.of_level("success")

    def test_quantities_add_to_existing_server_lines(self, guest_lines, shopper, api_client, auth_headers, shoe):
        api_client.post(
            "/cart/add",
            json={"product_id": shoe["id"], "size": 9, "quantity": 3},
            headers=auth_headers(shopper),
        )

        guest_lines.login("asha@example.com", "secret123")

        assert _server_lines(guest_lines) == [(8.0, 1), (9.0, 5)]

    def test_failed_line_does_not_stop_the_rest(self, storefront, shopper, shoe):
        storefront.add_to_cart(shoe, 11, 1)
        storefront.add_to_cart(shoe, 9, 1)

        storefront.login("asha@example.com", "secret123")

        assert storefront.last_merge.merged == 1
        assert storefront.last_merge.failed == 1
        assert _server_lines(storefront) == [(9.0, 1)]
        assert storefront.store.get(GUEST_CART_KEY) is None
        assert storefront.notifier.of_level("warning") == ["Some items could not be merged from guest cart"]

    def test_malformed_lines_are_skipped(self, storefront, shopper, shoe):
        storefront.add_to_cart(shoe, 9, 1)
        stored = storefront.store.get(GUEST_CART_KEY)
        storefront.store.set(GUEST_CART_KEY, stored + [{"size": 9, "quantity": 1}, "junk"])

        storefront.login("asha@example.com", "secret123")

        assert storefront.last_merge.merged == 1
        assert storefront.last_merge.skipped == 2
        assert storefront.last_merge.attempted == 1

    def test_empty_guest_cart_just_loads(self, storefront, shopper):
        storefront.login("asha@example.com", "secret123")

        assert storefront.last_merge.merged == 0
        assert storefront.notifier.of_level("warning") == []
        assert storefront.notifier.of_level("success") == ["Login successful!"]


class TestMergeRunsOncePerLogin:
    def test_later_loads_do_not_merge_again(self, guest_lines, shopper):
        guest_lines.login("asha@example.com", "secret123")
        first = guest_lines.last_merge

        guest_lines.store.set(GUEST_CART_KEY, [{"product": {"id": "stray"}, "size": 9, "quantity": 1}])
        guest_lines.load()
        guest_lines.restore()

        assert guest_lines.last_merge is first
        assert _server_lines(guest_lines) == [(8.0, 1), (9.0, 2)]

    def test_merges_again_after_logout_and_login(self, guest_lines, shopper, shoe):
        guest_lines.login("asha@example.com", "secret123")
        guest_lines.logout()

        guest_lines.add_to_cart(shoe, 9.5, 1)
        guest_lines.login("asha@example.com", "secret123")

        assert guest_lines.last_merge.merged == 1
        assert _server_lines(guest_lines) == [(8.0, 1), (9.0, 2), (9.5, 1)]
