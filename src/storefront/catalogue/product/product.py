"""Product aggregate: a sellable item with a price and a stock count.

Stock is only ever withdrawn through ``withdraw_stock``, which checks and
decrements in one step and never lets the count go negative. Order placement
calls it for every line inside the same unit of work that records the order.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from storefront.catalogue.money import to_money
from storefront.catalogue.product.events import (
    ProductCreated,
    ProductDetailsUpdated,
    ProductPriceChanged,
    StockReplenished,
    StockWithdrawn,
)
from storefront.domain import storefront
from storefront.errors import InsufficientStockError

DEFAULT_INITIAL_STOCK = 10


@storefront.aggregate
class Product:
    """Product aggregate root."""

    name: String(required=True, max_length=255)
    description: Text()
    price: Float(required=True, min_value=0.0)
    stock: Integer(default=0, min_value=0)
    category_id: Identifier()
    city: String(max_length=100)
    seller_id: Identifier()
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def stock_cannot_be_negative(self):
        if self.stock is not None and self.stock < 0:
            raise ValidationError({"stock": ["Stock cannot be negative"]})

    @classmethod
    def create(
        cls,
        name,
        price,
        stock=DEFAULT_INITIAL_STOCK,
        seller_id=None,
        category_id=None,
        city=None,
        description=None,
    ):
        now = datetime.now(UTC)
        product = cls(
            name=name,
            price=float(to_money(price)),
            stock=stock,
            seller_id=seller_id,
            category_id=category_id,
            city=city,
            description=description,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductCreated(
                product_id=str(product.id),
                name=product.name,
                price=product.price,
                stock=product.stock,
                seller_id=str(seller_id) if seller_id else None,
                category_id=str(category_id) if category_id else None,
                created_at=now,
            )
        )
        return product

    def change_price(self, new_price):
        if new_price is None or to_money(new_price) < 0:
            raise ValidationError({"price": ["Price must be zero or positive"]})

        previous = self.price
        self.price = float(to_money(new_price))
        self.updated_at = datetime.now(UTC)
        self.raise_(
            ProductPriceChanged(
                product_id=str(self.id),
                previous_price=previous,
                new_price=self.price,
            )
        )

    def update_details(self, name=None, description=None, city=None, category_id=None):
        if name is not None:
            self.name = name
        if description is not None:
            self.description = description
        if city is not None:
            self.city = city
        if category_id is not None:
            self.category_id = category_id
        self.updated_at = datetime.now(UTC)
        self.raise_(ProductDetailsUpdated(product_id=str(self.id), name=self.name, city=self.city))

    def restock(self, quantity):
        if quantity is None or quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be positive"]})

        previous = self.stock or 0
        self.stock = previous + quantity
        self.updated_at = datetime.now(UTC)
        self.raise_(
            StockReplenished(
                product_id=str(self.id),
                quantity=quantity,
                previous_stock=previous,
                new_stock=self.stock,
            )
        )

    def has_stock_for(self, quantity) -> bool:
        return (self.stock or 0) >= quantity

    def withdraw_stock(self, quantity, order_id=None):
        """Decrement stock by ``quantity`` if enough is on hand.

        Raises InsufficientStockError and leaves stock untouched otherwise.
        """
        if quantity is None or quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be positive"]})

        available = self.stock or 0
        if available < quantity:
            raise InsufficientStockError(
                {
                    "stock": [f"Insufficient stock for {self.name}: {available} available, {quantity} requested"],
                    "product_id": [str(self.id)],
                }
            )

        self.stock = available - quantity
        self.updated_at = datetime.now(UTC)
        self.raise_(
            StockWithdrawn(
                product_id=str(self.id),
                order_id=str(order_id) if order_id else None,
                quantity=quantity,
                previous_stock=available,
                new_stock=self.stock,
            )
        )
