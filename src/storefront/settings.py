"""Application settings read from the ``[custom]`` table of ``domain.toml``."""

from storefront.domain import storefront

DEFAULT_ORDER_QUEUE_CAPACITY = 20
DEFAULT_BCRYPT_ROUNDS = 12


def _custom():
    return storefront.config.get("custom") or {}


def order_queue_capacity() -> int:
    return int(_custom().get("order_queue_capacity", DEFAULT_ORDER_QUEUE_CAPACITY))


def bcrypt_rounds() -> int:
    return int(_custom().get("bcrypt_rounds", DEFAULT_BCRYPT_ROUNDS))
