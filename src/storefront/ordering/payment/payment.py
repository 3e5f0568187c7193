"""Payment aggregate (CQRS): one payment record per order.

State Machine:
    PENDING → COMPLETED

The amount is fixed to the order total when the order is placed.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, String

from storefront.catalogue.money import to_money
from storefront.domain import storefront
from storefront.ordering.payment.events import PaymentCompleted, PaymentRecorded


class PaymentStatus(Enum):
    PENDING = "Pending"
    COMPLETED = "Completed"


@storefront.aggregate
class Payment:
    order_id = Identifier(required=True)
    amount = Float(required=True, min_value=0.0)
    status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    method = String(max_length=50)
    created_at = DateTime()
    completed_at = DateTime()

    @classmethod
    def record(cls, order_id, amount, method=None):
        now = datetime.now(UTC)
        payment = cls(
            order_id=order_id,
            amount=float(to_money(amount)),
            status=PaymentStatus.PENDING.value,
            method=method,
            created_at=now,
        )
        payment.raise_(
            PaymentRecorded(
                payment_id=str(payment.id),
                order_id=str(order_id),
                amount=payment.amount,
                recorded_at=now,
            )
        )
        return payment

    @property
    def is_completed(self) -> bool:
        return self.status == PaymentStatus.COMPLETED.value

    def complete(self, method):
        """Mark the payment completed. A second call changes nothing."""
        if self.is_completed:
            return False
        if not method:
            raise ValidationError({"method": ["Payment method is required"]})

        now = datetime.now(UTC)
        self.status = PaymentStatus.COMPLETED.value
        self.method = method
        self.completed_at = now
        self.raise_(
            PaymentCompleted(
                payment_id=str(self.id),
                order_id=str(self.order_id),
                amount=self.amount,
                method=method,
                completed_at=now,
            )
        )
        return True
