"""Tests for the decimal price helpers."""

from decimal import Decimal

from storefront.catalogue.money import line_total, money_sum, to_money


class TestToMoney:
    def test_float_is_rounded_to_cents(self):
        assert to_money(10.005) == Decimal("10.01")

    def test_string_and_int_inputs(self):
        assert to_money("3.1") == Decimal("3.10")
        assert to_money(7) == Decimal("7.00")

    def test_decimal_passes_through_rounded(self):
        assert to_money(Decimal("2.345")) == Decimal("2.35")


class TestLineTotals:
    def test_line_total_multiplies_quantity(self):
        assert line_total(10.0, 2) == Decimal("20.00")

    def test_float_noise_is_removed(self):
        # 0.1 * 3 is 0.30000000000000004 in binary floating point
        assert line_total(0.1, 3) == Decimal("0.30")

    def test_money_sum(self):
        assert money_sum([line_total(10.0, 2), line_total(5.0, 1)]) == Decimal("25.00")

    def test_money_sum_of_nothing_is_zero(self):
        assert money_sum([]) == Decimal("0.00")
