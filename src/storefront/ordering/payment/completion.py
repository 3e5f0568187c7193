"""Payment completion: marks the payment Completed and the order Paid."""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.errors import OrderNotFoundError
from storefront.ordering.order.order import Order
from storefront.ordering.order.queries import load_order, payment_for_order
from storefront.ordering.payment.payment import Payment

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Payment")
class CompletePayment:
    order_id = Identifier(required=True)
    method = String(required=True, max_length=50)


@storefront.command_handler(part_of=Payment)
class CompletePaymentHandler:
    @handle(CompletePayment)
    def complete_payment(self, command):
        order = load_order(command.order_id)
        payment = payment_for_order(order.id)
        if payment is None:
            raise OrderNotFoundError({"order_id": [f"No payment recorded for order {command.order_id}"]})
        if not command.method:
            raise ValidationError({"method": ["Payment method is required"]})

        order_changed = order.mark_paid(payment_id=payment.id, method=payment.method or command.method)
        payment_changed = payment.complete(command.method)

        if payment_changed:
            current_domain.repository_for(Payment).add(payment)
        if order_changed:
            current_domain.repository_for(Order).add(order)

        logger.info(
            "Payment completed",
            order_id=str(order.id),
            payment_id=str(payment.id),
            method=payment.method,
            already_completed=not (payment_changed or order_changed),
        )
        return str(payment.id)
