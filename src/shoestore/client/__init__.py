"""ShoeStore storefront client: session, cart, checkout and admin reads over HTTP."""

from shoestore.client.config import ClientConfig
from shoestore.client.notifications import Notifier, RecordingNotifier
from shoestore.client.storefront import Storefront

__all__ = ["ClientConfig", "Notifier", "RecordingNotifier", "Storefront"]
