"""ShoeStore management CLI.

Usage:
    python src/manage.py seed-admin       # Create the ADMIN_EMAIL account if missing
    python src/manage.py seed-catalogue   # Add the demo shoes when the catalogue is empty

With the default in-memory provider the data only lives for the process, so
these commands are mostly useful against a configured persistent provider.
"""

import argparse
import json
import sys

DEMO_CATALOGUE = [
    {
        "name": "Court Classic",
        "brand": "Stride",
        "description": "Leather low-top for everyday wear",
        "category": "casual",
        "color": "White",
        "price": 3499.0,
        "sizes": [{"size": 7, "stock": 12}, {"size": 8, "stock": 15}, {"size": 9, "stock": 10}],
    },
    {
        "name": "Oxford Prime",
        "brand": "Hallmark",
        "description": "Cap-toe oxford in polished calfskin",
        "category": "formal",
        "color": "Black",
        "price": 6999.0,
        "sizes": [{"size": 8, "stock": 6}, {"size": 9, "stock": 8}, {"size": 10, "stock": 4}],
    },
    {
        "name": "Tempo Runner",
        "brand": "Velo",
        "description": "Cushioned road running shoe",
        "category": "sports",
        "color": "Blue",
        "price": 4999.0,
        "sizes": [{"size": 7.5, "stock": 9}, {"size": 8.5, "stock": 11}, {"size": 9.5, "stock": 7}],
    },
    {
        "name": "Ridge Hiker",
        "brand": "Summit",
        "description": "Waterproof leather hiking boot",
        "category": "boots",
        "color": "Brown",
        "price": 7999.0,
        "sizes": [{"size": 9, "stock": 5}, {"size": 10, "stock": 5}, {"size": 11, "stock": 3}],
    },
]


def _domain():
    from shoestore.domain import shoestore

    shoestore.init()
    return shoestore


def seed_admin():
    from shoestore.identity.registration import ensure_admin

    domain = _domain()
    with domain.domain_context():
        account_id = ensure_admin()
    print(f"Admin account ready: {account_id}")


def seed_catalogue():
    from shoestore.catalogue.management import CreateProduct
    from shoestore.catalogue.product import Product

    domain = _domain()
    with domain.domain_context():
        if domain.repository_for(Product).listing(limit=1):
            print("Catalogue already has products; nothing to do.")
            return

        for entry in DEMO_CATALOGUE:
            product_id = domain.process(
                CreateProduct(
                    name=entry["name"],
                    brand=entry["brand"],
                    description=entry["description"],
                    category=entry["category"],
                    color=entry["color"],
                    price=entry["price"],
                    images=json.dumps([]),
                    sizes=json.dumps(entry["sizes"]),
                ),
                asynchronous=False,
            )
            print(f"  Added {entry['name']} ({product_id})")
    print("Done.")


def main():
    parser = argparse.ArgumentParser(description="ShoeStore management CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("seed-admin", help="Create the administrator account if it does not exist")
    subparsers.add_parser("seed-catalogue", help="Add demo products to an empty catalogue")

    args = parser.parse_args()

    if args.command == "seed-admin":
        seed_admin()
    elif args.command == "seed-catalogue":
        seed_catalogue()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
