"""Storefront facade: what a UI calls.

Each public method catches client errors at the call site, reports them
through the Notifier and returns a safe default, so a UI never has to handle
exceptions itself. Payment errors never clear the cart.
"""

import httpx

from shoestore.client.admin import AdminConsole, DashboardMetrics, product_filters
from shoestore.client.cart import CartStore, LocalCartBackend, RemoteCartBackend
from shoestore.client.checkout import CheckoutFlow, CheckoutOutcome, Navigation, PaymentRequest
from shoestore.client.config import ClientConfig
from shoestore.client.errors import PaymentError, PaymentVerificationError, StorefrontError
from shoestore.client.http import ApiClient
from shoestore.client.merge import MergeResult, merge_guest_cart
from shoestore.client.notifications import Notifier
from shoestore.client.session import SessionContext
from shoestore.client.storage import LocalStore
from shoestore.utils.logging import get_logger

logger = get_logger(__name__)


class Storefront:
    def __init__(
        self,
        config: ClientConfig | None = None,
        notifier: Notifier | None = None,
        http: httpx.Client | None = None,
        store: LocalStore | None = None,
    ) -> None:
        self.config = config or ClientConfig.from_env()
        self.notifier = notifier or Notifier()
        self.store = store or LocalStore(self.config.storage_path)
        self.session = SessionContext(self.store)
        self.api = ApiClient(self.config, self.session, http)
        self.cart = CartStore(self.session, LocalCartBackend(self.store), RemoteCartBackend(self.api))
        self.checkout = CheckoutFlow(self.api, self.cart, self.config, self.session)
        self.admin = AdminConsole(self.api)
        self.last_merge: MergeResult | None = None
        self._merged_transitions = 0

    def _report(self, exc: StorefrontError) -> None:
        self.notifier.error(exc.message)

    # -------------------------------------------------------------------
    # Session
    # -------------------------------------------------------------------
    def _start_session(self, payload: dict) -> None:
        self.session.begin(payload["token"], payload.get("user"))
        self.load()

    def signup(self, name: str, email: str, password: str) -> bool:
        try:
            payload = self.api.post("/auth/signup", json={"name": name, "email": email, "password": password})
        except StorefrontError as exc:
            self._report(exc)
            return False
        self._start_session(payload)
        self.notifier.success("Registration successful!")
        return True

    def login(self, email: str, password: str) -> bool:
        try:
            payload = self.api.post("/auth/login", json={"email": email, "password": password})
        except StorefrontError as exc:
            self._report(exc)
            return False
        self._start_session(payload)
        self.notifier.success("Login successful!")
        return True

    def restore(self) -> bool:
        """Resume a session from a stored token; an invalid token is discarded."""
        if not self.session.is_authenticated:
            self.load()
            return False
        try:
            self.session.user = self.api.get("/auth/profile")
        except StorefrontError as exc:
            logger.info("stored_session_rejected", error=exc.message)
            self.session.end()
            self.load()
            return False
        self.load()
        return True

    def logout(self) -> None:
        self.session.end()
        self.cart.clear_local()
        self.notifier.success("Logged out successfully")

    # -------------------------------------------------------------------
    # Cart
    # -------------------------------------------------------------------
    def load(self) -> list[dict]:
        """Load the active cart, merging the guest cart on the first load after sign-in."""
        try:
            if self.session.is_authenticated and self.session.transitions > self._merged_transitions:
                self._merged_transitions = self.session.transitions
                self.last_merge = merge_guest_cart(self.cart)
                if self.last_merge.failed or self.last_merge.skipped:
                    self.notifier.warning("Some items could not be merged from guest cart")
                elif self.last_merge.merged:
                    self.notifier.success("Guest cart items merged successfully")
            else:
                self.cart.reload()
        except StorefrontError as exc:
            self._report(exc)
            self.notifier.error("Failed to load cart")
        return self.cart.items

    def add_to_cart(self, product: dict, size, quantity: int = 1) -> bool:
        try:
            self.cart.add(product, size, quantity)
        except StorefrontError as exc:
            self._report(exc)
            return False
        self.notifier.success("Item added to cart successfully")
        return True

    def remove_from_cart(self, product_id: str, size) -> bool:
        try:
            self.cart.remove(product_id, size)
        except StorefrontError as exc:
            self._report(exc)
            return False
        self.notifier.success("Item removed from cart successfully")
        return True

    def update_quantity(self, product_id: str, size, quantity: int) -> bool:
        try:
            self.cart.update_quantity(product_id, size, quantity)
        except StorefrontError as exc:
            self._report(exc)
            return False
        self.notifier.success("Quantity updated successfully")
        return True

    def clear_cart(self) -> bool:
        try:
            self.cart.clear()
        except StorefrontError as exc:
            self._report(exc)
            return False
        self.notifier.success("Cart cleared successfully")
        return True

    # -------------------------------------------------------------------
    # Checkout
    # -------------------------------------------------------------------
    def start_checkout(self, address) -> PaymentRequest | Navigation | None:
        try:
            return self.checkout.begin(address)
        except StorefrontError as exc:
            self._report(exc)
            return None

    def complete_payment(self, order_id: str, callback: dict) -> CheckoutOutcome:
        try:
            outcome = self.checkout.complete(order_id, callback)
        except PaymentError:
            message = PaymentVerificationError.default_message
            self.notifier.error(message)
            return CheckoutOutcome(success=False, navigate_to=Navigation.ORDERS, message=message, order_id=order_id)
        self.notifier.success(outcome.message)
        return outcome

    def payment_dismissed(self, order_id: str) -> CheckoutOutcome:
        outcome = self.checkout.dismissed(order_id)
        self.notifier.error(outcome.message)
        return outcome

    def payment_failed(self, order_id: str, error=None) -> CheckoutOutcome:
        outcome = self.checkout.failed(order_id, error)
        self.notifier.error(outcome.message)
        return outcome

    # -------------------------------------------------------------------
    # Catalogue and orders
    # -------------------------------------------------------------------
    def products(
        self,
        category: str | None = None,
        search: str | None = None,
        min_price: float | None = None,
        max_price: float | None = None,
    ) -> list[dict]:
        params = product_filters(category, search, min_price, max_price)
        try:
            return self.api.get("/products", params=params) or []
        except StorefrontError as exc:
            self._report(exc)
            return []

    def product(self, product_id: str) -> dict | None:
        try:
            return self.api.get(f"/products/{product_id}")
        except StorefrontError as exc:
            self._report(exc)
            return None

    def my_orders(self) -> list[dict]:
        try:
            return self.api.get("/orders/my-orders") or []
        except StorefrontError as exc:
            self._report(exc)
            return []

    def dashboard(self) -> DashboardMetrics:
        try:
            return self.admin.dashboard()
        except StorefrontError as exc:
            self._report(exc)
            return DashboardMetrics()
