"""Explicit caller identity for application operations.

Handlers and the order pipeline never read transport state; callers pass an
``AuthContext`` built by the HTTP layer (or by tests and scripts).
"""

from dataclasses import dataclass

from storefront.identity.user import Role
from storefront.errors import AccessDeniedError


@dataclass(frozen=True)
class AuthContext:
    user_id: str
    role: str = Role.CUSTOMER.value

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value

    def has_role(self, *roles: Role) -> bool:
        return self.role in {r.value for r in roles}

    def can_act_for(self, user_id) -> bool:
        return self.is_admin or str(self.user_id) == str(user_id)


def require_role(auth: AuthContext | None, *roles: Role) -> AuthContext:
    """Return ``auth`` if it carries one of ``roles``; raise AccessDeniedError otherwise."""
    if auth is None or not auth.user_id:
        raise AccessDeniedError({"auth": ["Authentication required"]})
    if roles and not auth.has_role(*roles):
        allowed = ", ".join(r.value for r in roles)
        raise AccessDeniedError({"role": [f"Requires one of: {allowed}"]})
    return auth


def require_owner(auth: AuthContext | None, owner_id) -> AuthContext:
    auth = require_role(auth)
    if not auth.can_act_for(owner_id):
        raise AccessDeniedError({"auth": ["Not allowed to act for another user"]})
    return auth
