"""CartItem aggregate (CQRS): one document per (user, product) pair.

Each line caches the product's name and price at the time it was added so
the cart can be rendered without catalogue lookups. Checkout always reprices
from the live product.
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, Integer, String

from storefront.cart.events import CartItemAdded, CartItemQuantityChanged
from storefront.catalogue.money import line_total
from storefront.domain import storefront


@storefront.aggregate
class CartItem:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    name = String(max_length=255)
    price = Float(default=0.0)
    added_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(cls, user_id, product_id, quantity, name, price):
        if quantity is None or quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        now = datetime.now(UTC)
        item = cls(
            user_id=user_id,
            product_id=product_id,
            quantity=quantity,
            name=name,
            price=price,
            added_at=now,
            updated_at=now,
        )
        item.raise_(
            CartItemAdded(
                user_id=str(user_id),
                product_id=str(product_id),
                quantity=quantity,
                new_quantity=quantity,
            )
        )
        return item

    @property
    def total(self):
        return float(line_total(self.price or 0.0, self.quantity))

    def add_quantity(self, quantity, name=None, price=None):
        """Accumulate quantity and refresh the cached product snapshot."""
        if quantity is None or quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        self.quantity += quantity
        if name is not None:
            self.name = name
        if price is not None:
            self.price = price
        self.updated_at = datetime.now(UTC)
        self.raise_(
            CartItemAdded(
                user_id=str(self.user_id),
                product_id=str(self.product_id),
                quantity=quantity,
                new_quantity=self.quantity,
            )
        )

    def change_quantity(self, new_quantity):
        if new_quantity is None or new_quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        previous = self.quantity
        self.quantity = new_quantity
        self.updated_at = datetime.now(UTC)
        self.raise_(
            CartItemQuantityChanged(
                user_id=str(self.user_id),
                product_id=str(self.product_id),
                previous_quantity=previous,
                new_quantity=new_quantity,
            )
        )
