"""User aggregate (CQRS): shoppers, sellers and administrators.

Passwords are stored as bcrypt hashes. The role decides which catalogue and
order operations a user may perform; see ``identity.auth``.
"""

from datetime import UTC, datetime
from enum import Enum

import bcrypt
from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, String

from storefront.domain import storefront
from storefront.identity.events import UserRegistered


class Role(Enum):
    CUSTOMER = "customer"
    SELLER = "seller"
    ADMIN = "admin"


@storefront.aggregate
class User:
    email = String(required=True, max_length=254)
    password_hash = String(required=True, max_length=128)
    role = String(choices=Role, default=Role.CUSTOMER.value)
    created_at = DateTime()

    @invariant.post
    def email_must_look_like_an_address(self):
        if self.email and (self.email.count("@") != 1 or " " in self.email):
            raise ValidationError({"email": [f"Invalid email address: {self.email}"]})

    @classmethod
    def register(cls, email, password, role=None, rounds=12):
        if not password or len(password) < 8:
            raise ValidationError({"password": ["Password must be at least 8 characters"]})

        hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds))
        user = cls(
            email=email.strip().lower(),
            password_hash=hashed.decode("utf-8"),
            role=role or Role.CUSTOMER.value,
            created_at=datetime.now(UTC),
        )
        user.raise_(
            UserRegistered(
                user_id=str(user.id),
                email=user.email,
                role=user.role,
                registered_at=user.created_at,
            )
        )
        return user

    def check_password(self, password) -> bool:
        if not password:
            return False
        return bcrypt.checkpw(password.encode("utf-8"), self.password_hash.encode("utf-8"))
