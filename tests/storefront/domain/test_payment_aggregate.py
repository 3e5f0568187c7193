"""Tests for the Payment aggregate."""

import pytest
from protean.exceptions import ValidationError
from storefront.ordering.payment.events import PaymentCompleted, PaymentRecorded
from storefront.ordering.payment.payment import Payment, PaymentStatus


class TestPaymentRecord:
    def test_record_is_pending(self):
        payment = Payment.record(order_id="order-1", amount=25.0)
        assert payment.status == PaymentStatus.PENDING.value
        assert payment.amount == 25.0
        assert payment.method is None
        assert isinstance(payment._events[-1], PaymentRecorded)

    def test_amount_is_rounded(self):
        assert Payment.record(order_id="order-1", amount=10.004).amount == 10.0


class TestPaymentCompletion:
    def test_complete(self):
        payment = Payment.record(order_id="order-1", amount=25.0)
        assert payment.complete("card") is True
        assert payment.is_completed
        assert payment.method == "card"
        assert payment.completed_at is not None
        assert isinstance(payment._events[-1], PaymentCompleted)

    def test_complete_twice_changes_nothing(self):
        payment = Payment.record(order_id="order-1", amount=25.0)
        payment.complete("card")
        completed_at = payment.completed_at
        payment._events.clear()

        assert payment.complete("paypal") is False
        assert payment.method == "card"
        assert payment.completed_at == completed_at
        assert payment._events == []

    def test_method_required(self):
        payment = Payment.record(order_id="order-1", amount=25.0)
        with pytest.raises(ValidationError):
            payment.complete("")
        assert not payment.is_completed
