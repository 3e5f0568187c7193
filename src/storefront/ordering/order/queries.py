"""Read-side lookups over orders and payments, including dashboard figures."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.catalogue.money import money_sum
from storefront.errors import OrderNotFoundError
from storefront.ordering.order.order import Order, OrderStatus
from storefront.ordering.payment.payment import Payment
from storefront.utils.query import fetch_all

_REVENUE_STATUSES = {OrderStatus.PAID.value, OrderStatus.COMPLETED.value}


def _orders():
    return current_domain.repository_for(Order)._dao.query


def load_order(order_id):
    """Fetch an order or raise OrderNotFoundError."""
    try:
        return current_domain.repository_for(Order).get(order_id)
    except ObjectNotFoundError:
        raise OrderNotFoundError({"order_id": [f"Order {order_id} not found"]}) from None


def payment_for_order(order_id):
    results = current_domain.repository_for(Payment)._dao.query.filter(order_id=str(order_id)).all().items
    return results[0] if results else None


def orders_for_customer(customer_id):
    """A customer's orders, newest first."""
    return fetch_all(_orders().filter(customer_id=str(customer_id)))


def all_orders():
    """Every order, newest first."""
    return fetch_all(_orders())


def total_revenue() -> float:
    """Sum of totals over paid and completed orders."""
    return float(money_sum(o.total_price for o in all_orders() if o.status in _REVENUE_STATUSES))


def order_count() -> int:
    return _orders().all().total
