"""ShoeStore domain: carts, orders, payment verification and the admin console.

A single Protean domain holds every aggregate so that order placement can read
catalogue prices and the admin dashboard can scan orders, accounts and
products inside one domain context.
"""

from protean.domain import Domain

from shoestore.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

shoestore = Domain(name="shoestore")
