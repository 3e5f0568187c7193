"""Category management: command, handler and listing."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import String
from protean.utils.globals import current_domain

from storefront.catalogue.category.category import Category
from storefront.domain import storefront
from storefront.utils.query import fetch_all


@storefront.command(part_of="Category")
class CreateCategory:
    name: String(required=True, max_length=100)


def all_categories():
    """Every category, by name."""
    return fetch_all(current_domain.repository_for(Category)._dao.query, order_by="name")


@storefront.command_handler(part_of=Category)
class ManageCategoryHandler:
    @handle(CreateCategory)
    def create_category(self, command):
        wanted = command.name.strip().lower()
        if any(c.name.lower() == wanted for c in all_categories()):
            raise ValidationError({"name": [f"Category '{command.name}' already exists"]})

        category = Category.create(name=command.name)
        current_domain.repository_for(Category).add(category)
        return str(category.id)
