"""BDD tests for checkout and payment."""

from pytest_bdd import given, parsers, scenarios, then, when
from storefront.errors import EmptyCartError, InsufficientStockError
from storefront.ordering.order.queries import load_order, payment_for_order

scenarios("features/checkout.feature")


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@given("the customer checks out the cart")
@when("the customer checks out the cart")
def check_out(pipeline, customer, checkout):
    try:
        checkout["order_id"] = pipeline.place_order_from_cart(customer)
    except (EmptyCartError, InsufficientStockError) as exc:
        checkout["exc"] = exc


@when(parsers.cfparse('the customer pays by "{method}"'))
def pay(pipeline, customer, checkout, method):
    pipeline.complete_payment(customer, checkout["order_id"], method)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order is "{status}" with a total of {total:f}'))
def order_state(checkout, status, total):
    order = load_order(checkout["order_id"])
    assert order.status == status
    assert order.total_price == total


@then(parsers.cfparse("the order has {count:d} items"))
def order_item_count(checkout, count):
    assert len(load_order(checkout["order_id"]).items) == count


@then(parsers.cfparse('a "{status}" payment of {amount:f} is recorded'))
def payment_state(checkout, status, amount):
    payment = payment_for_order(checkout["order_id"])
    assert payment.status == status
    assert payment.amount == amount


@then("checkout fails with an insufficient stock error")
def fails_insufficient_stock(checkout):
    assert isinstance(checkout["exc"], InsufficientStockError)
    assert checkout["order_id"] is None


@then("checkout fails with an empty cart error")
def fails_empty_cart(checkout):
    assert isinstance(checkout["exc"], EmptyCartError)
