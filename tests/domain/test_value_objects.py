"""Unit tests for domain value objects and parsing helpers."""

from decimal import Decimal

import pytest

from orderedit.domain.exceptions import ValidationError
from orderedit.domain.model.value_objects import (
    Money,
    parse_amount,
    parse_quantity,
    same_backend_id,
)


# ── Money ────────────────────────────────────────────────────────────────────


class TestMoney:

    def test_creation(self):
        m = Money(Decimal("10.50"))
        assert m.amount == Decimal("10.50")
        assert m.currency == "USD"

    def test_of_factory_from_string(self):
        assert Money.of("25.99").amount == Decimal("25.99")

    def test_of_rejects_garbage(self):
        with pytest.raises(ValidationError, match="Invalid money amount"):
            Money.of("abc")

    def test_negative_amount_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            Money(Decimal("-1"))

    def test_addition_and_multiplication(self):
        assert Money.of("7.50") * 3 + Money.of("1") == Money.of("23.50")

    def test_rounded(self):
        assert Money.of("10.005").rounded() == Money.of("10.01")

    def test_str_formatting(self):
        assert str(Money.of("15")) == "$15.00"


# ── Numeric parsing ──────────────────────────────────────────────────────────


class TestParseAmount:

    @pytest.mark.parametrize("raw", ["", "   ", "abc", None, "NaN", "Infinity", "-3", True])
    def test_unparseable_or_negative_becomes_zero(self, raw):
        assert parse_amount(raw) == Decimal("0")

    @pytest.mark.parametrize("raw", ["1e400", "1e999999999999", "12345678901234567"])
    def test_absurdly_large_becomes_zero(self, raw):
        assert parse_amount(raw) == Decimal("0")

    def test_large_but_sane_amount_is_kept(self):
        assert parse_amount("999999999999999") == Decimal("999999999999999")

    def test_accepts_numbers_and_strings(self):
        assert parse_amount(4.5) == Decimal("4.5")
        assert parse_amount(" 23.50 ") == Decimal("23.50")
        assert parse_amount(3) == Decimal("3")


class TestParseQuantity:

    def test_truncates_fractions(self):
        assert parse_quantity("2.7") == 2

    def test_garbage_is_zero(self):
        assert parse_quantity("two") == 0
        assert parse_quantity(None) == 0

    def test_negative_is_zero(self):
        assert parse_quantity(-4) == 0

    @pytest.mark.parametrize("raw", ["1e999999999999", "1e400"])
    def test_huge_exponent_is_zero(self, raw):
        assert parse_quantity(raw) == 0


# ── Backend id identity ──────────────────────────────────────────────────────


class TestSameBackendId:

    def test_number_and_string_are_equal(self):
        assert same_backend_id(2, "2")
        assert same_backend_id("17", 17)

    def test_different_ids(self):
        assert not same_backend_id(2, 3)

    def test_none_never_matches(self):
        assert not same_backend_id(None, None)
        assert not same_backend_id(None, 1)
