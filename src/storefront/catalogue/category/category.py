"""Category aggregate: a flat list of product categories."""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, String

from storefront.catalogue.category.events import CategoryCreated
from storefront.domain import storefront


@storefront.aggregate
class Category:
    name: String(required=True, max_length=100)
    created_at: DateTime()

    @classmethod
    def create(cls, name):
        name = (name or "").strip()
        if not name:
            raise ValidationError({"name": ["Category name cannot be blank"]})

        category = cls(name=name, created_at=datetime.now(UTC))
        category.raise_(
            CategoryCreated(
                category_id=str(category.id),
                name=category.name,
                created_at=category.created_at,
            )
        )
        return category
