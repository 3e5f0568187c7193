"""Administrative order status changes.

Cancelling an order puts its quantities back on the shelf; this is the
compensating step for the stock withdrawn at placement.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.catalogue.product.management import load_product
from storefront.catalogue.product.product import Product
from storefront.domain import storefront
from storefront.errors import ProductNotFoundError
from storefront.ordering.order.order import Order, OrderStatus
from storefront.ordering.order.queries import load_order

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, choices=OrderStatus)


def _restock_lines(order):
    repo = current_domain.repository_for(Product)
    for item in order.items:
        try:
            product = load_product(item.product_id)
        except ProductNotFoundError:
            logger.warning(
                "Cannot restock deleted product",
                order_id=str(order.id),
                product_id=str(item.product_id),
            )
            continue
        product.restock(item.quantity)
        repo.add(product)


@storefront.command_handler(part_of=Order)
class OrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_status(self, command):
        order = load_order(command.order_id)
        previous = order.status
        changed = order.transition_to(command.status)
        if not changed:
            return previous

        if order.status == OrderStatus.CANCELLED.value:
            _restock_lines(order)

        current_domain.repository_for(Order).add(order)
        logger.info(
            "Order status changed",
            order_id=str(order.id),
            previous_status=previous,
            new_status=order.status,
        )
        return order.status
