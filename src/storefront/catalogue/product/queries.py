"""Read-side lookups over the product catalogue."""

from protean.utils.globals import current_domain

from storefront.catalogue.product.product import Product
from storefront.utils.query import fetch_all


def _products():
    return current_domain.repository_for(Product)._dao.query


def all_products():
    """The whole catalogue, newest first."""
    return fetch_all(_products())


def product_count() -> int:
    return _products().all().total


def search_products(search=None, category_id=None, city=None, seller_id=None):
    """Filter the catalogue.

    ``search`` is a case-insensitive substring match on the name; category,
    city and seller must match exactly. Empty values are ignored.
    """
    criteria = {}
    if category_id:
        criteria["category_id"] = str(category_id)
    if city:
        criteria["city"] = city
    if seller_id:
        criteria["seller_id"] = str(seller_id)

    query = _products()
    products = fetch_all(query.filter(**criteria) if criteria else query)

    if search:
        needle = search.lower()
        products = [p for p in products if needle in (p.name or "").lower()]
    return products


def products_by_seller(seller_id):
    return search_products(seller_id=seller_id)


def unique_cities():
    return sorted({p.city for p in all_products() if p.city})
