"""Storefront domain: catalogue, carts, checkout, payments and reviews.

A single Protean domain so that order placement can withdraw stock, record
the order and record its payment inside one unit of work.
"""

import structlog
from protean.domain import Domain

storefront = Domain(name="storefront")

logger = structlog.get_logger(__name__)
