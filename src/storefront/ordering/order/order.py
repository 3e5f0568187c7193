"""Order aggregate (CQRS): a customer's purchase, priced at placement time.

State Machine:
    PENDING → PAID → COMPLETED
    PENDING | PAID → CANCELLED

Line items snapshot the product name and unit price when the order is
placed; later catalogue price changes never alter an existing order.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from storefront.catalogue.money import line_total, money_sum, to_money
from storefront.domain import storefront
from storefront.ordering.order.events import OrderPaid, OrderPlaced, OrderStatusChanged


class OrderStatus(Enum):
    PENDING = "Pending"
    PAID = "Paid"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PAID, OrderStatus.CANCELLED},
    OrderStatus.PAID: {OrderStatus.COMPLETED, OrderStatus.CANCELLED},
    OrderStatus.COMPLETED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}


@storefront.entity(part_of="Order")
class OrderItem:
    """An immutable line: which product, how many, and at what unit price."""

    product_id = Identifier(required=True)
    name = String(max_length=255)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)

    @property
    def line_total(self):
        return float(line_total(self.unit_price, self.quantity))


@storefront.aggregate
class Order:
    customer_id = Identifier(required=True)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    items = HasMany(OrderItem)
    total_price = Float(default=0.0)
    payment_method = String(max_length=50)
    created_at = DateTime()
    updated_at = DateTime()
    paid_at = DateTime()

    @invariant.post
    def total_must_equal_sum_of_lines(self):
        if not self.items:
            return
        expected = money_sum(line_total(i.unit_price, i.quantity) for i in self.items)
        if to_money(self.total_price or 0.0) != expected:
            raise ValidationError({"total_price": [f"Total {self.total_price} does not match line items ({expected})"]})

    @classmethod
    def place(cls, customer_id, lines):
        """Create a Pending order.

        Args:
            customer_id: The user placing the order.
            lines: Iterable of dicts with product_id, name, quantity, unit_price.
        """
        lines = list(lines)
        if not lines:
            raise ValidationError({"items": ["An order needs at least one item"]})

        now = datetime.now(UTC)
        items = [
            OrderItem(
                product_id=line["product_id"],
                name=line.get("name"),
                quantity=line["quantity"],
                unit_price=float(to_money(line["unit_price"])),
            )
            for line in lines
        ]
        total = money_sum(line_total(i.unit_price, i.quantity) for i in items)

        order = cls(
            customer_id=customer_id,
            status=OrderStatus.PENDING.value,
            items=items,
            total_price=float(total),
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                customer_id=str(customer_id),
                items=json.dumps(
                    [
                        {
                            "product_id": str(i.product_id),
                            "name": i.name,
                            "quantity": i.quantity,
                            "unit_price": i.unit_price,
                        }
                        for i in items
                    ]
                ),
                total_price=order.total_price,
                placed_at=now,
            )
        )
        return order

    def _assert_can_transition(self, target_status):
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    def mark_paid(self, payment_id, method):
        """Record a completed payment. Repeating it on a paid order is a no-op."""
        current = OrderStatus(self.status)
        if current in (OrderStatus.PAID, OrderStatus.COMPLETED):
            return False

        self._assert_can_transition(OrderStatus.PAID)
        now = datetime.now(UTC)
        self.status = OrderStatus.PAID.value
        self.payment_method = method
        self.paid_at = now
        self.updated_at = now
        self.raise_(
            OrderPaid(
                order_id=str(self.id),
                payment_id=str(payment_id),
                method=method,
                amount=self.total_price,
                paid_at=now,
            )
        )
        return True

    def transition_to(self, target_status):
        """Move forward to ``target_status``; same-status requests are ignored."""
        target = OrderStatus(target_status)
        current = OrderStatus(self.status)
        if target == current:
            return False

        self._assert_can_transition(target)
        now = datetime.now(UTC)
        self.status = target.value
        self.updated_at = now
        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=current.value,
                new_status=target.value,
                changed_at=now,
            )
        )
        return True
