"""
Unit tests for value objects: amounts, denominations, receipts and results.
"""

from dataclasses import FrozenInstanceError
from decimal import Decimal

import pytest

from vending_machine.core.exceptions import InvalidAmountError, InvalidDenominationError
from vending_machine.core.value_objects import (
    CashSnapshot,
    Coin,
    CurrencyAmount,
    Denomination,
    InventoryItem,
    Product,
    ProductKind,
    PurchaseFailureReason,
    PurchaseResult,
    Receipt,
)


# =============================================================================
# Currency Amount Tests
# =============================================================================


class TestCurrencyAmount:
    """Tests for CurrencyAmount value object."""

    @pytest.mark.parametrize(
        "rubles, expected_kopecks",
        [
            (Decimal("1.005"), 101),
            (Decimal("1.004"), 100),
            (Decimal("0.995"), 100),
            ("1.005", 101),
            (1.005, 101),
            (0.995, 100),
            (Decimal("-1.005"), -101),
        ],
    )
    def test_from_major_units_rounds_half_away_from_zero(self, rubles, expected_kopecks):
        """Test rounding at the half-kopeck boundary."""
        assert CurrencyAmount.from_major_units(rubles).minor_units == expected_kopecks

    def test_from_major_units_integer(self):
        """Test creating an amount from whole rubles."""
        assert CurrencyAmount.from_major_units(7).minor_units == 700

    def test_from_major_units_invalid(self):
        """Test that non-numeric input is rejected."""
        with pytest.raises(InvalidAmountError):
            CurrencyAmount.from_major_units("seven")

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), "NaN", "-Infinity"])
    def test_from_major_units_non_finite(self, value):
        """Test that NaN and infinities are rejected as invalid amounts."""
        with pytest.raises(InvalidAmountError):
            CurrencyAmount.from_major_units(value)

    def test_from_minor_units(self):
        """Test direct construction from kopecks."""
        amount = CurrencyAmount.from_minor_units(1234)
        assert amount.minor_units == 1234
        assert amount.major_units == Decimal("12.34")

    def test_non_integer_minor_units_rejected(self):
        """Test that fractional kopecks are not allowed."""
        with pytest.raises(TypeError):
            CurrencyAmount(12.5)  # type: ignore[arg-type]

    def test_add_subtract_compare(self):
        """Test arithmetic and ordering."""
        a = CurrencyAmount.from_major_units(10)
        b = CurrencyAmount.from_major_units("3.50")
        assert (a + b).minor_units == 1350
        assert (a - b).minor_units == 650
        assert a >= b
        assert b <= a
        assert b < a
        assert a > b
        assert a == CurrencyAmount(1000)

    def test_subtraction_may_go_negative(self):
        """Test that a difference keeps its sign."""
        result = CurrencyAmount(500) - CurrencyAmount(700)
        assert result.minor_units == -200
        assert result < CurrencyAmount.zero()

    def test_sorting_matches_integer_order(self):
        """Test that ordering follows kopecks."""
        values = [700, -5, 0, 1000, 100]
        amounts = sorted(CurrencyAmount(v) for v in values)
        assert [a.minor_units for a in amounts] == sorted(values)

    def test_add_non_amount_not_supported(self):
        """Test that adding a plain int fails."""
        with pytest.raises(TypeError):
            CurrencyAmount(100) + 100  # type: ignore[operator]

    def test_str(self):
        """Test ruble formatting."""
        assert str(CurrencyAmount.from_major_units("12.34")) == "12,34 ₽"
        assert str(CurrencyAmount(5)) == "0,05 ₽"
        assert str(CurrencyAmount(-250)) == "-2,50 ₽"

    def test_immutable(self):
        """Test that amounts cannot be changed."""
        amount = CurrencyAmount(100)
        with pytest.raises(FrozenInstanceError):
            amount.minor_units = 200  # type: ignore[misc]


# =============================================================================
# Denomination / Coin Tests
# =============================================================================


class TestDenomination:
    """Tests for Denomination and Coin."""

    def test_values(self):
        """Test the closed set of coin values."""
        assert [int(d) for d in Denomination] == [100, 200, 500, 1000]

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("1", Denomination.R1),
            ("2р", Denomination.R2),
            ("5₽", Denomination.R5),
            (" 10 ", Denomination.R10),
            (10, Denomination.R10),
        ],
    )
    def test_parse(self, text, expected):
        """Test parsing ruble face values."""
        assert Denomination.parse(text) is expected

    @pytest.mark.parametrize("text", ["3", "", "abc", "100", "0.5"])
    def test_parse_invalid(self, text):
        """Test that unknown values are rejected."""
        with pytest.raises(InvalidDenominationError):
            Denomination.parse(text)

    def test_coin_value(self):
        """Test coin value equals its denomination."""
        assert Coin(Denomination.R5).minor_units == 500


# =============================================================================
# Receipt / Result Tests
# =============================================================================


@pytest.fixture
def product():
    return Product("D2", "Кола", CurrencyAmount(700), ProductKind.DRINK)


class TestReceipt:
    """Tests for Receipt."""

    def test_issue_keeps_breakdown(self, product):
        """Test that the change breakdown is preserved."""
        receipt = Receipt.issue(
            product, CurrencyAmount(700), CurrencyAmount(1000), CurrencyAmount(300), {100: 1, 200: 1}
        )
        assert receipt.change == {200: 1, 100: 1}
        assert receipt.change_coins == ((200, 1), (100, 1))

    def test_change_copy_does_not_mutate_receipt(self, product):
        """Test that the returned map is a copy."""
        receipt = Receipt.issue(
            product, CurrencyAmount(700), CurrencyAmount(1000), CurrencyAmount(300), {200: 1, 100: 1}
        )
        receipt.change[200] = 99
        assert receipt.change[200] == 1

    def test_to_dict(self, product):
        """Test converting a receipt to dict."""
        receipt = Receipt.issue(
            product, CurrencyAmount(700), CurrencyAmount(1000), CurrencyAmount(300), {200: 1, 100: 1}
        )
        d = receipt.to_dict()
        assert d["paid"] == 1000
        assert d["price"] == 700
        assert d["change_amount"] == 300
        assert d["product"]["id"] == "D2"
        assert d["product"]["kind"] == "drink"


class TestPurchaseResult:
    """Tests for PurchaseResult."""

    def test_failed(self):
        """Test a failed result carries its reason."""
        result = PurchaseResult.failed(PurchaseFailureReason.INSUFFICIENT_FUNDS)
        assert result.success is False
        assert result.receipt is None
        assert result.message == "Insufficient funds"
        assert result.to_dict() == {
            "success": False,
            "message": "Insufficient funds",
            "reason": "insufficient_funds",
        }

    def test_completed(self, product):
        """Test a completed result carries the receipt."""
        receipt = Receipt.issue(
            product, CurrencyAmount(700), CurrencyAmount(700), CurrencyAmount(0), {}
        )
        result = PurchaseResult.completed(receipt)
        assert result.success is True
        assert result.reason is None
        assert "Кола" in result.message
        assert result.to_dict()["data"]["change"] == {}


class TestSnapshots:
    """Tests for CashSnapshot and InventoryItem."""

    def test_cash_snapshot(self):
        """Test snapshot totals and copies."""
        snapshot = CashSnapshot.from_pools({1000: 2, 100: 0}, {200: 1})
        assert snapshot.vault == {1000: 2}
        assert snapshot.hopper == {200: 1}
        assert snapshot.vault_total == CurrencyAmount(2000)
        assert snapshot.hopper_total == CurrencyAmount(200)
        assert snapshot.to_dict()["vault_total"] == 2000

    def test_inventory_item_to_dict(self, product):
        """Test item view conversion."""
        d = InventoryItem(product, 3).to_dict()
        assert d["quantity"] == 3
        assert d["price"] == 700
