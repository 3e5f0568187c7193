"""Cart management: commands, handler and the cart read model."""

import json

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Integer, Text
from protean.utils.globals import current_domain

from storefront.cart.cart_item import CartItem
from storefront.catalogue.money import money_sum
from storefront.catalogue.product.management import load_product
from storefront.domain import storefront
from storefront.utils.query import fetch_all

logger = structlog.get_logger(__name__)


@storefront.command(part_of="CartItem")
class AddToCart:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(default=1, min_value=1)


@storefront.command(part_of="CartItem")
class UpdateCartQuantity:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@storefront.command(part_of="CartItem")
class RemoveFromCart:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)


@storefront.command(part_of="CartItem")
class ClearCart:
    """Remove cart lines for a user. An empty ``product_ids`` clears everything."""

    user_id = Identifier(required=True)
    product_ids = Text()  # JSON: list of product ids


def cart_items(user_id):
    return fetch_all(current_domain.repository_for(CartItem)._dao.query.filter(user_id=str(user_id)), order_by=None)


def find_cart_item(user_id, product_id):
    results = (
        current_domain.repository_for(CartItem)
        ._dao.query.filter(user_id=str(user_id), product_id=str(product_id))
        .all()
        .items
    )
    return results[0] if results else None


def cart_total(items) -> float:
    return float(money_sum(item.total for item in items))


@storefront.command_handler(part_of=CartItem)
class ManageCartHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        product = load_product(command.product_id)
        quantity = command.quantity or 1
        repo = current_domain.repository_for(CartItem)

        item = find_cart_item(command.user_id, command.product_id)
        if item is None:
            item = CartItem.create(
                user_id=command.user_id,
                product_id=command.product_id,
                quantity=quantity,
                name=product.name,
                price=product.price,
            )
        else:
            item.add_quantity(quantity, name=product.name, price=product.price)
        repo.add(item)
        return str(item.id)

    @handle(UpdateCartQuantity)
    def update_quantity(self, command):
        item = find_cart_item(command.user_id, command.product_id)
        if item is None:
            raise ValidationError({"product_id": ["Product is not in the cart"]})
        item.change_quantity(command.quantity)
        current_domain.repository_for(CartItem).add(item)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        item = find_cart_item(command.user_id, command.product_id)
        if item is None:
            raise ValidationError({"product_id": ["Product is not in the cart"]})
        current_domain.repository_for(CartItem)._dao.delete(item)

    @handle(ClearCart)
    def clear_cart(self, command):
        wanted = {str(pid) for pid in (json.loads(command.product_ids) if command.product_ids else [])}
        dao = current_domain.repository_for(CartItem)._dao

        removed = 0
        for item in cart_items(command.user_id):
            if wanted and str(item.product_id) not in wanted:
                continue
            dao.delete(item)
            removed += 1

        logger.info("Cart cleared", user_id=str(command.user_id), removed=removed)
        return removed
