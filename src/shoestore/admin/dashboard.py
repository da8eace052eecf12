"""Admin read models computed by scanning orders, accounts and products.

There are no projections behind the console: every call walks at most
SCAN_LIMIT of the newest orders.
"""

from collections import defaultdict
from datetime import date

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from shoestore.catalogue.product import Product
from shoestore.identity.account import Account, AccountRole
from shoestore.ordering.order.order import Order, OrderStatus

SCAN_LIMIT = 1000
RECENT_ORDERS = 5
TOP_PRODUCTS = 5


def _within(order: Order, start_date: date | None, end_date: date | None) -> bool:
    if order.created_at is None:
        return start_date is None and end_date is None
    placed_on = order.created_at.date()
    if start_date and placed_on < start_date:
        return False
    if end_date and placed_on > end_date:
        return False
    return True


def search_orders(
    status: str | None = None,
    search: str | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    limit: int = SCAN_LIMIT,
) -> list[Order]:
    """Newest-first orders matching every given filter.

    ``search`` matches the order id, customer name or customer email,
    case-insensitively. Date bounds are inclusive.
    """
    needle = (search or "").strip().lower()
    matches = []
    for order in current_domain.repository_for(Order).scan(limit):
        if status and order.status != status:
            continue
        if not _within(order, start_date, end_date):
            continue
        if needle:
            haystack = " ".join(
                value.lower() for value in (str(order.id), order.customer_name or "", order.customer_email or "")
            )
            if needle not in haystack:
                continue
        matches.append(order)
    return matches


def top_products(orders: list[Order], limit: int = TOP_PRODUCTS) -> list[dict]:
    """Products ranked by units sold, with price × units as revenue."""
    units = defaultdict(int)
    last_seen = {}
    for order in orders:
        if order.status == OrderStatus.CANCELLED.value:
            continue
        for item in order.items:
            product_id = str(item.product_id)
            units[product_id] += item.quantity
            last_seen.setdefault(product_id, item)

    product_repo = current_domain.repository_for(Product)
    ranked = []
    for product_id, sold in sorted(units.items(), key=lambda pair: pair[1], reverse=True)[:limit]:
        try:
            product = product_repo.get(product_id)
            name, price = product.name, product.price
            brand, category = product.brand, product.category
            images = product.image_urls
            image = images[0] if images else None
        except ObjectNotFoundError:
            line = last_seen[product_id]
            name, price, image = line.name, line.unit_price, line.image
            brand = category = None
        ranked.append(
            {
                "product_id": product_id,
                "name": name,
                "brand": brand,
                "category": category,
                "price": price,
                "image": image,
                "units_sold": sold,
                "revenue": round(price * sold, 2),
            }
        )
    return ranked


def compute_dashboard(
    status: str | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
) -> dict:
    orders = search_orders(status=status, start_date=start_date, end_date=end_date)

    revenue = round(
        sum(order.total_amount for order in orders if order.status != OrderStatus.CANCELLED.value),
        2,
    )
    pending = sum(1 for order in orders if order.status == OrderStatus.PENDING.value)
    users = current_domain.repository_for(Account).count_by_role(AccountRole.CUSTOMER.value)

    return {
        "total_revenue": revenue,
        "total_orders": len(orders),
        "total_users": users,
        "pending_orders": pending,
        "recent_orders": orders[:RECENT_ORDERS],
        "top_products": top_products(orders),
    }
