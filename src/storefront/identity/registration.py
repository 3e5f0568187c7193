"""User registration, authentication and removal."""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.identity.user import Role, User
from storefront.errors import UserNotFoundError
from storefront.settings import bcrypt_rounds
from storefront.utils.query import fetch_all

logger = structlog.get_logger(__name__)


@storefront.command(part_of="User")
class RegisterUser:
    email = String(required=True, max_length=254)
    password = String(required=True, max_length=128)
    role = String(choices=Role, default=Role.CUSTOMER.value)


@storefront.command(part_of="User")
class RemoveUser:
    user_id = Identifier(required=True)


def find_by_email(email):
    """Return the user registered under ``email`` or None."""
    if not email:
        return None
    results = current_domain.repository_for(User)._dao.query.filter(email=email.strip().lower()).all().items
    return results[0] if results else None


def authenticate(email, password):
    """Return the matching user; raise ValidationError on bad credentials.

    Unknown email and wrong password produce the same error.
    """
    user = find_by_email(email)
    if user is None or not user.check_password(password):
        logger.info("Authentication failed", email=email)
        raise ValidationError({"credentials": ["Invalid credentials"]})
    return user


@storefront.command_handler(part_of=User)
class RegistrationHandler:
    @handle(RegisterUser)
    def register_user(self, command):
        if find_by_email(command.email) is not None:
            raise ValidationError({"email": ["Email is already registered"]})

        user = User.register(
            email=command.email,
            password=command.password,
            role=command.role,
            rounds=bcrypt_rounds(),
        )
        current_domain.repository_for(User).add(user)
        logger.info("User registered", user_id=str(user.id), role=user.role)
        return str(user.id)

    @handle(RemoveUser)
    def remove_user(self, command):
        repo = current_domain.repository_for(User)
        try:
            user = repo.get(command.user_id)
        except ObjectNotFoundError:
            raise UserNotFoundError({"user_id": [f"User {command.user_id} not found"]}) from None
        repo._dao.delete(user)
        logger.info("User removed", user_id=str(command.user_id))


def all_users():
    """Every registered user, newest first."""
    return fetch_all(current_domain.repository_for(User)._dao.query)


def user_count() -> int:
    return current_domain.repository_for(User)._dao.query.all().total
