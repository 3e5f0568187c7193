"""Tests for the Order aggregate: pricing at placement and status transitions."""

import json

import pytest
from protean.exceptions import ValidationError
from storefront.ordering.order.events import OrderPaid, OrderPlaced, OrderStatusChanged
from storefront.ordering.order.order import Order, OrderStatus


def _lines():
    return [
        {"product_id": "prod-a", "name": "A", "quantity": 2, "unit_price": 10.0},
        {"product_id": "prod-b", "name": "B", "quantity": 1, "unit_price": 5.0},
    ]


def _order():
    order = Order.place(customer_id="cust-001", lines=_lines())
    order._events.clear()
    return order


class TestOrderPlacement:
    def test_total_is_sum_of_lines(self):
        order = Order.place(customer_id="cust-001", lines=_lines())
        assert order.total_price == 25.0
        assert [i.unit_price for i in order.items] == [10.0, 5.0]
        assert [i.line_total for i in order.items] == [20.0, 5.0]

    def test_new_order_is_pending(self):
        assert _order().status == OrderStatus.PENDING.value

    def test_placed_event_carries_lines(self):
        order = Order.place(customer_id="cust-001", lines=_lines())
        event = order._events[-1]
        assert isinstance(event, OrderPlaced)
        assert event.total_price == 25.0
        assert [line["quantity"] for line in json.loads(event.items)] == [2, 1]

    def test_cent_rounding_in_total(self):
        order = Order.place(
            customer_id="cust-001",
            lines=[{"product_id": "p", "name": "P", "quantity": 3, "unit_price": 0.1}],
        )
        assert order.total_price == 0.3

    def test_order_needs_items(self):
        with pytest.raises(ValidationError):
            Order.place(customer_id="cust-001", lines=[])


class TestOrderPayment:
    def test_mark_paid(self):
        order = _order()
        assert order.mark_paid(payment_id="pay-1", method="card") is True
        assert order.status == OrderStatus.PAID.value
        assert order.payment_method == "card"
        assert order.paid_at is not None
        assert isinstance(order._events[-1], OrderPaid)

    def test_mark_paid_twice_is_a_no_op(self):
        order = _order()
        order.mark_paid(payment_id="pay-1", method="card")
        order._events.clear()
        assert order.mark_paid(payment_id="pay-1", method="card") is False
        assert order._events == []

    def test_cannot_pay_cancelled_order(self):
        order = _order()
        order.transition_to(OrderStatus.CANCELLED.value)
        with pytest.raises(ValidationError):
            order.mark_paid(payment_id="pay-1", method="card")


class TestOrderTransitions:
    def test_paid_to_completed(self):
        order = _order()
        order.mark_paid(payment_id="pay-1", method="card")
        assert order.transition_to(OrderStatus.COMPLETED.value) is True
        assert order.status == OrderStatus.COMPLETED.value
        assert isinstance(order._events[-1], OrderStatusChanged)

    def test_pending_to_cancelled(self):
        order = _order()
        order.transition_to(OrderStatus.CANCELLED.value)
        assert order.status == OrderStatus.CANCELLED.value

    def test_same_status_is_a_no_op(self):
        order = _order()
        assert order.transition_to(OrderStatus.PENDING.value) is False
        assert order._events == []

    def test_backward_transition_rejected(self):
        order = _order()
        order.mark_paid(payment_id="pay-1", method="card")
        with pytest.raises(ValidationError):
            order.transition_to(OrderStatus.PENDING.value)

    def test_pending_cannot_jump_to_completed(self):
        with pytest.raises(ValidationError):
            _order().transition_to(OrderStatus.COMPLETED.value)

    def test_unknown_status_rejected(self):
        with pytest.raises(ValueError):
            _order().transition_to("Shipped")
