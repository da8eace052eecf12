"""Guest cart merge, run once when a shopper signs in."""

from dataclasses import dataclass

from shoestore.client.cart import CartStore, is_positive_quantity, line_product_id, parse_size
from shoestore.client.errors import StorefrontError
from shoestore.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class MergeResult:
    merged: int = 0
    skipped: int = 0
    failed: int = 0

    @property
    def attempted(self) -> int:
        return self.merged + self.failed


def merge_guest_cart(cart: CartStore) -> MergeResult:
    """Replay the guest lines into the server cart, then drop the guest list.

    Lines are sent one at a time in their original order; a failed line does
    not stop the ones after it. Malformed lines are skipped. The guest list is
    cleared whatever happened and the server cart is reloaded.
    """
    guest_items = cart.local.load()
    if not guest_items:
        cart.reload()
        return MergeResult()

    merged = skipped = failed = 0
    for item in guest_items:
        product_id = line_product_id(item) if isinstance(item, dict) else None
        size = item.get("size") if isinstance(item, dict) else None
        quantity = item.get("quantity") if isinstance(item, dict) else None

        if not product_id or size is None or not is_positive_quantity(quantity):
            skipped += 1
            logger.warning("guest_item_skipped", item=item)
            continue

        try:
            cart.remote.add({"id": product_id}, parse_size(size), quantity)
        except StorefrontError as exc:
            failed += 1
            logger.warning("guest_item_merge_failed", product_id=product_id, size=size, error=str(exc))
            continue
        merged += 1

    cart.local.clear()
    cart.reload()

    result = MergeResult(merged=merged, skipped=skipped, failed=failed)
    logger.info("guest_cart_merged", merged=merged, skipped=skipped, failed=failed)
    return result
