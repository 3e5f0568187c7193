"""Application tests for completing an order's payment."""

import pytest
from storefront.errors import AccessDeniedError, OrderNotFoundError
from storefront.ordering.order.order import OrderStatus
from storefront.ordering.order.queries import load_order, payment_for_order, total_revenue
from storefront.ordering.payment.payment import PaymentStatus


@pytest.fixture()
def order_id(pipeline, customer, make_product):
    a = make_product(name="A", price=10.0)
    b = make_product(name="B", price=5.0)
    return pipeline.place_order(customer, [(a, 2), (b, 1)])


class TestCompletePayment:
    def test_payment_completed_and_order_paid(self, pipeline, customer, order_id):
        payment_id = pipeline.complete_payment(customer, order_id, "card")

        payment = payment_for_order(order_id)
        assert str(payment.id) == payment_id
        assert payment.status == PaymentStatus.COMPLETED.value
        assert payment.method == "card"
        assert payment.completed_at is not None

        order = load_order(order_id)
        assert order.status == OrderStatus.PAID.value
        assert order.payment_method == "card"

    def test_second_call_is_idempotent(self, pipeline, customer, order_id):
        pipeline.complete_payment(customer, order_id, "card")
        first = payment_for_order(order_id)

        pipeline.complete_payment(customer, order_id, "paypal")

        again = payment_for_order(order_id)
        assert again.status == PaymentStatus.COMPLETED.value
        assert again.method == "card"
        assert again.completed_at == first.completed_at
        assert load_order(order_id).status == OrderStatus.PAID.value

    def test_revenue_counts_paid_orders(self, pipeline, customer, order_id):
        assert total_revenue() == 0.0
        pipeline.complete_payment(customer, order_id, "card")
        assert total_revenue() == 25.0

    def test_unknown_order(self, pipeline, customer):
        with pytest.raises(OrderNotFoundError) as exc:
            pipeline.complete_payment(customer, "no-such-order", "card")
        assert exc.value.messages == {"order_id": ["Order no-such-order not found"]}

    def test_admin_may_complete_any_order(self, pipeline, admin, order_id):
        pipeline.complete_payment(admin, order_id, "bank-transfer")
        assert load_order(order_id).status == OrderStatus.PAID.value

    def test_other_customer_denied(self, pipeline, other_customer, order_id):
        with pytest.raises(AccessDeniedError):
            pipeline.complete_payment(other_customer, order_id, "card")
        assert payment_for_order(order_id).status == PaymentStatus.PENDING.value
