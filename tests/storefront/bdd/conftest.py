"""Shared BDD fixtures and step definitions for checkout."""

import pytest
from protean.utils.globals import current_domain
from pytest_bdd import given, parsers, then
from storefront.cart.management import AddToCart, cart_items
from storefront.catalogue.product.management import CreateProduct, load_product
from storefront.ordering.order.order import Order


@pytest.fixture()
def products():
    """Product ids by name."""
    return {}


@pytest.fixture()
def checkout():
    """Container for the placed order id and any captured error."""
    return {"order_id": None, "exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a product "{name}" priced {price:f} with {stock:d} in stock'))
def product_in_stock(products, name, price, stock):
    products[name] = current_domain.process(
        CreateProduct(name=name, price=price, stock=stock, seller_id="seller-001"),
        asynchronous=False,
    )


@given(parsers.cfparse('the customer has {quantity:d} of "{name}" in the cart'))
def customer_cart_line(products, customer, name, quantity):
    current_domain.process(
        AddToCart(user_id=customer.user_id, product_id=products[name], quantity=quantity),
        asynchronous=False,
    )


# ---------------------------------------------------------------------------
# Then steps (shared)
# ---------------------------------------------------------------------------
@then(parsers.cfparse('"{name}" has {stock:d} in stock'))
def product_stock_is(products, name, stock):
    assert load_product(products[name]).stock == stock


@then("no order is recorded")
def no_order_recorded():
    assert current_domain.repository_for(Order)._dao.query.all().items == []


@then("the cart is empty")
def cart_is_empty(customer):
    assert cart_items(customer.user_id) == []


@then(parsers.cfparse("the cart still holds {count:d} line"))
def cart_holds(customer, count):
    assert len(cart_items(customer.user_id)) == count
