"""Tests for the rebalancing calculator."""

from decimal import Decimal

from portfolio_ledger.domain.constants import RebalancingActionType
from portfolio_ledger.domain.models import CategoryAllocation
from portfolio_ledger.domain.services.rebalancing import (
    calculate_adjustments,
    classify_adjustment,
)


def _allocation(name: str, value: str, target: str | None) -> CategoryAllocation:
    return CategoryAllocation(
        name=name,
        current_value=Decimal(value),
        target_percentage=Decimal(target) if target is not None else None,
    )


def test_overweight_category_sells_and_underweight_buys():
    actions = calculate_adjustments(
        [_allocation("Stocks", "70000", "50"), _allocation("Bonds", "30000", "50")],
        Decimal("100000"),
    )

    by_name = {action.category_name: action for action in actions}
    assert by_name["Stocks"].action == RebalancingActionType.SELL
    assert by_name["Stocks"].adjustment_amount == Decimal("-20000")
    assert by_name["Stocks"].current_percentage == Decimal("70")
    assert by_name["Bonds"].action == RebalancingActionType.BUY
    assert by_name["Bonds"].adjustment_amount == Decimal("20000")


def test_zero_total_returns_no_actions():
    actions = calculate_adjustments(
        [_allocation("Stocks", "0", "60"), _allocation("Bonds", "0", "40")],
        Decimal("0"),
    )

    assert actions == []


def test_categories_without_target_are_omitted():
    actions = calculate_adjustments(
        [
            _allocation("Stocks", "500", "50"),
            _allocation("Cash", "400", None),
            _allocation("Bonds", "100", "50"),
        ],
        Decimal("1000"),
    )

    assert [action.category_name for action in actions] == ["Bonds", "Stocks"]


def test_results_sorted_by_magnitude_with_stable_ties():
    actions = calculate_adjustments(
        [
            _allocation("A", "300", "20"),
            _allocation("B", "100", "20"),
            _allocation("C", "100", "30"),
            _allocation("D", "500", "30"),
        ],
        Decimal("1000"),
    )

    magnitudes = [abs(action.adjustment_amount) for action in actions]
    assert magnitudes == sorted(magnitudes, reverse=True)
    assert [action.category_name for action in actions] == ["C", "D", "A", "B"]


def test_small_adjustments_need_no_action():
    assert classify_adjustment(Decimal("0.99")) == RebalancingActionType.NO_ACTION
    assert classify_adjustment(Decimal("-0.5")) == RebalancingActionType.NO_ACTION
    assert classify_adjustment(Decimal("1")) == RebalancingActionType.BUY
    assert classify_adjustment(Decimal("-1")) == RebalancingActionType.SELL
