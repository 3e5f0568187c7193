"""Storefront HTTP API package."""

from storefront.api.errors import register_error_handlers
from storefront.api.routes import (
    admin_router,
    cart_router,
    category_router,
    order_router,
    product_router,
    review_router,
    user_router,
)

ROUTERS = [
    product_router,
    category_router,
    cart_router,
    order_router,
    review_router,
    user_router,
    admin_router,
]

__all__ = ["ROUTERS", "register_error_handlers"]
