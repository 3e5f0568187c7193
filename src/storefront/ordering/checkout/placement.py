"""Order placement: the transactional core of checkout.

The handler runs inside one unit of work: it reprices every line from the
live product, withdraws stock with a check-and-decrement per product, and
records the Pending order and its Pending payment. Any failure aborts the
whole unit, so a rejected checkout leaves no order, no payment and no stock
change behind.
"""

import json

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from storefront.catalogue.product.management import load_product
from storefront.catalogue.product.product import Product
from storefront.domain import storefront
from storefront.errors import EmptyCartError, InsufficientStockError
from storefront.ordering.order.order import Order
from storefront.ordering.payment.payment import Payment

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class PlaceOrder:
    customer_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of {product_id, quantity}


def merge_items(items):
    """Normalize requested items into ``[(product_id, quantity), ...]``.

    Accepts dicts with product_id/quantity or (product_id, quantity) pairs.
    Repeated products are merged, keeping first-seen order.
    """
    if isinstance(items, str):
        items = json.loads(items)
    if not items:
        raise EmptyCartError({"items": ["Cannot place an order with no items"]})

    merged = {}
    for entry in items:
        if isinstance(entry, dict):
            product_id, quantity = entry.get("product_id"), entry.get("quantity")
        else:
            product_id, quantity = entry

        if not product_id:
            raise ValidationError({"product_id": ["Every item needs a product id"]})
        if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 1:
            raise ValidationError({"quantity": [f"Quantity for {product_id} must be at least 1"]})

        key = str(product_id)
        merged[key] = merged.get(key, 0) + quantity
    return list(merged.items())


@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        requested = merge_items(command.items)

        # Validate everything before the first write
        products = {}
        for product_id, quantity in requested:
            product = load_product(product_id)
            if not product.has_stock_for(quantity):
                raise InsufficientStockError(
                    {
                        "stock": [f"Insufficient stock for {product.name}: {product.stock} available, {quantity} requested"],
                        "product_id": [product_id],
                    }
                )
            products[product_id] = product

        order = Order.place(
            customer_id=command.customer_id,
            lines=[
                {
                    "product_id": product_id,
                    "name": products[product_id].name,
                    "quantity": quantity,
                    "unit_price": products[product_id].price,
                }
                for product_id, quantity in requested
            ],
        )
        for product_id, quantity in requested:
            products[product_id].withdraw_stock(quantity, order_id=order.id)

        current_domain.repository_for(Order).add(order)
        product_repo = current_domain.repository_for(Product)
        for product in products.values():
            product_repo.add(product)
        current_domain.repository_for(Payment).add(Payment.record(order_id=order.id, amount=order.total_price))

        logger.info(
            "Order recorded",
            order_id=str(order.id),
            customer_id=str(command.customer_id),
            line_count=len(requested),
            total_price=order.total_price,
        )
        return str(order.id)
