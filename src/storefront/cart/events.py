"""Domain events for cart lines."""

from protean.fields import Identifier, Integer

from storefront.domain import storefront


@storefront.event(part_of="CartItem")
class CartItemAdded:
    """A product was added to a cart, or its quantity increased."""

    __version__ = 1

    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@storefront.event(part_of="CartItem")
class CartItemQuantityChanged:
    __version__ = 1

    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)
