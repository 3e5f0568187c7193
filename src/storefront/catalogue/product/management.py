"""Product management: seller and admin write commands and their handler."""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.product.product import DEFAULT_INITIAL_STOCK, Product
from storefront.domain import storefront
from storefront.errors import ProductNotFoundError
from storefront.identity.auth import AuthContext, require_owner, require_role
from storefront.identity.user import Role

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Product")
class CreateProduct:
    name: String(required=True, max_length=255)
    price: Float(required=True, min_value=0.0)
    stock: Integer(default=DEFAULT_INITIAL_STOCK, min_value=0)
    seller_id: Identifier()
    category_id: Identifier()
    city: String(max_length=100)
    description: Text()


@storefront.command(part_of="Product")
class UpdateProductPrice:
    product_id: Identifier(required=True)
    price: Float(required=True, min_value=0.0)


@storefront.command(part_of="Product")
class UpdateProductDetails:
    product_id: Identifier(required=True)
    name: String(max_length=255)
    description: Text()
    city: String(max_length=100)
    category_id: Identifier()


@storefront.command(part_of="Product")
class RestockProduct:
    product_id: Identifier(required=True)
    quantity: Integer(required=True, min_value=1)


@storefront.command(part_of="Product")
class DeleteProduct:
    product_id: Identifier(required=True)


def load_product(product_id):
    """Fetch a product or raise ProductNotFoundError."""
    try:
        return current_domain.repository_for(Product).get(product_id)
    except ObjectNotFoundError:
        raise ProductNotFoundError({"product_id": [f"Product {product_id} not found"]}) from None


def authorize_product_write(auth: AuthContext, product_id) -> Product:
    """Admins may edit any product; sellers only their own listings."""
    require_role(auth, Role.SELLER, Role.ADMIN)
    product = load_product(product_id)
    if not auth.is_admin:
        require_owner(auth, product.seller_id)
    return product


@storefront.command_handler(part_of=Product)
class ManageProductHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        product = Product.create(
            name=command.name,
            price=command.price,
            stock=command.stock if command.stock is not None else DEFAULT_INITIAL_STOCK,
            seller_id=command.seller_id,
            category_id=command.category_id,
            city=command.city,
            description=command.description,
        )
        current_domain.repository_for(Product).add(product)
        logger.info("Product created", product_id=str(product.id), seller_id=command.seller_id)
        return str(product.id)

    @handle(UpdateProductPrice)
    def update_price(self, command):
        product = load_product(command.product_id)
        product.change_price(command.price)
        current_domain.repository_for(Product).add(product)

    @handle(UpdateProductDetails)
    def update_details(self, command):
        product = load_product(command.product_id)
        product.update_details(
            name=command.name,
            description=command.description,
            city=command.city,
            category_id=command.category_id,
        )
        current_domain.repository_for(Product).add(product)

    @handle(RestockProduct)
    def restock(self, command):
        product = load_product(command.product_id)
        product.restock(command.quantity)
        current_domain.repository_for(Product).add(product)

    @handle(DeleteProduct)
    def delete_product(self, command):
        product = load_product(command.product_id)
        current_domain.repository_for(Product)._dao.delete(product)
        logger.info("Product deleted", product_id=str(command.product_id))
