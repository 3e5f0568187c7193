"""Request-scoped dependencies: caller identity and the order pipeline."""

from fastapi import Header, Request

from storefront.identity.auth import AuthContext
from storefront.identity.user import Role
from storefront.ordering.checkout.pipeline import OrderPipeline


def get_auth(
    x_user_id: str | None = Header(default=None),
    x_user_role: str = Header(default=Role.CUSTOMER.value),
) -> AuthContext | None:
    """Anonymous callers get ``None``; operations that need a user reject it."""
    if not x_user_id:
        return None
    return AuthContext(user_id=x_user_id, role=x_user_role.strip().lower())


def get_pipeline(request: Request) -> OrderPipeline:
    return request.app.state.pipeline
