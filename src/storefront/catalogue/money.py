"""Decimal helpers for prices.

Prices are persisted as floats; all arithmetic goes through ``Decimal`` and
is rounded to cents so that totals never pick up binary float noise.
"""

from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")


def to_money(value) -> Decimal:
    """Convert a price (float, int, str or Decimal) to a cent-rounded Decimal."""
    if isinstance(value, Decimal):
        amount = value
    else:
        amount = Decimal(str(value))
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def line_total(unit_price, quantity) -> Decimal:
    return to_money(to_money(unit_price) * int(quantity))


def money_sum(amounts) -> Decimal:
    return to_money(sum((to_money(a) for a in amounts), Decimal("0")))
