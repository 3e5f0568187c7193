"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance maintains its own state; nothing is shared
across users.
"""

from dataclasses import dataclass, field


@dataclass
class ShopperState:
    """Tracks state for a single simulated shopper."""

    user_id: str | None = None
    product_ids: list[str] = field(default_factory=list)
    cart_lines: int = 0
    order_ids: list[str] = field(default_factory=list)
    rejected_checkouts: int = 0


@dataclass
class SellerState:
    """Tracks the listings created by a simulated seller."""

    user_id: str | None = None
    product_ids: list[str] = field(default_factory=list)
