"""Storefront management CLI.

Usage:
    python src/manage.py setup-db   # Create all tables
    python src/manage.py drop-db    # Drop all tables
    python src/manage.py seed --admin-email admin@example.com --admin-password s3cret-pass
"""

import argparse
import sys

SAMPLE_CATEGORIES = ["Home", "Books", "Outdoors"]

SAMPLE_PRODUCTS = [
    {"name": "Walnut Desk Lamp", "price": 49.90, "stock": 12, "category": "Home", "city": "Lisbon"},
    {"name": "Linen Cushion Cover", "price": 18.50, "stock": 40, "category": "Home", "city": "Porto"},
    {"name": "Field Guide to Mosses", "price": 24.00, "stock": 8, "category": "Books", "city": "Lisbon"},
    {"name": "Enamel Camp Mug", "price": 12.00, "stock": 30, "category": "Outdoors", "city": "Braga"},
]


def _domain():
    from storefront.domain import storefront

    storefront.init()
    return storefront


def setup_databases():
    """Create database schemas for every relational provider."""
    from storefront.utils.db import setup_db

    print("Initializing storefront domain...")
    touched = setup_db(_domain())
    print(f"  Schema ready for: {', '.join(touched) or 'no relational providers'}.")


def drop_databases():
    """Drop database schemas for every relational provider."""
    from storefront.utils.db import drop_db

    print("Initializing storefront domain...")
    touched = drop_db(_domain())
    print(f"  Schema dropped for: {', '.join(touched) or 'no relational providers'}.")


def seed(admin_email, admin_password):
    """Create an admin, a seller and a small sample catalogue."""
    storefront = _domain()

    from storefront.catalogue.category.management import CreateCategory, all_categories
    from storefront.catalogue.product.management import CreateProduct
    from storefront.catalogue.product.queries import product_count
    from storefront.identity.registration import RegisterUser, find_by_email
    from storefront.identity.user import Role

    with storefront.domain_context():
        if find_by_email(admin_email) is None:
            storefront.process(
                RegisterUser(email=admin_email, password=admin_password, role=Role.ADMIN.value),
                asynchronous=False,
            )
            print(f"  Admin {admin_email} registered.")

        seller_email = "seller@" + admin_email.split("@", 1)[1]
        seller = find_by_email(seller_email)
        if seller is None:
            seller_id = storefront.process(
                RegisterUser(email=seller_email, password=admin_password, role=Role.SELLER.value),
                asynchronous=False,
            )
        else:
            seller_id = str(seller.id)

        if product_count():
            print("  Catalogue already has products, skipping sample data.")
            return

        category_ids = {c.name: str(c.id) for c in all_categories()}
        for name in SAMPLE_CATEGORIES:
            if name not in category_ids:
                category_ids[name] = storefront.process(CreateCategory(name=name), asynchronous=False)
        for product in SAMPLE_PRODUCTS:
            storefront.process(
                CreateProduct(
                    name=product["name"],
                    price=product["price"],
                    stock=product["stock"],
                    category_id=category_ids[product["category"]],
                    city=product["city"],
                    seller_id=seller_id,
                ),
                asynchronous=False,
            )
        print(f"  Seeded {len(category_ids)} categories and {len(SAMPLE_PRODUCTS)} products.")

    print("Done.")


def main():
    parser = argparse.ArgumentParser(description="Storefront management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    seed_parser = subparsers.add_parser("seed", help="Load an admin user and a sample catalogue")
    seed_parser.add_argument("--admin-email", required=True)
    seed_parser.add_argument("--admin-password", required=True)

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_databases()
    elif args.command == "drop-db":
        drop_databases()
    elif args.command == "seed":
        seed(args.admin_email, args.admin_password)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
