"""Tests for deletion and allocation policies."""

from datetime import datetime
from decimal import Decimal

import pytest

from portfolio_ledger.domain.constants import TransactionType
from portfolio_ledger.domain.errors import InvalidTargetAllocationError
from portfolio_ledger.domain.models import Transaction
from portfolio_ledger.domain.policies import (
    can_delete_transaction,
    quantity_after_deletion,
    target_allocation_warning,
    validate_target_percentage,
)


def _tx(transaction_type: TransactionType, qty: str) -> Transaction:
    return Transaction(
        asset_id="asset",
        transaction_type=transaction_type,
        transaction_date=datetime(2024, 1, 1),
        quantity=Decimal(qty),
        price_per_unit=Decimal("1"),
        total_amount=Decimal(qty),
    )


def test_deleting_buy_under_later_sell_is_refused():
    """Buy 10, sell 8: removing the buy would leave -8."""
    buy = _tx(TransactionType.BUY, "10")
    sell = _tx(TransactionType.SELL, "8")

    assert quantity_after_deletion([buy, sell], buy) == Decimal("-8")
    assert can_delete_transaction([buy, sell], buy) is False


def test_deleting_sell_is_allowed():
    buy = _tx(TransactionType.BUY, "10")
    sell = _tx(TransactionType.SELL, "8")

    assert quantity_after_deletion([buy, sell], sell) == Decimal("10")
    assert can_delete_transaction([buy, sell], sell) is True


def test_deleting_to_exactly_zero_is_allowed():
    buy = _tx(TransactionType.BUY, "5")

    assert can_delete_transaction([buy], buy) is True


@pytest.mark.parametrize("value", [None, Decimal("0"), Decimal("55.5"), Decimal("100")])
def test_valid_target_percentages(value):
    validate_target_percentage(value)


@pytest.mark.parametrize("value", [Decimal("-0.01"), Decimal("100.01")])
def test_invalid_target_percentages(value):
    with pytest.raises(InvalidTargetAllocationError):
        validate_target_percentage(value)


def test_target_allocation_warning():
    assert target_allocation_warning([]) is None
    assert target_allocation_warning([None, None]) is None
    assert target_allocation_warning([Decimal("60"), Decimal("40"), None]) is None
    warning = target_allocation_warning([Decimal("60"), Decimal("30")])
    assert warning == "Target allocations sum to 90% instead of 100%."
