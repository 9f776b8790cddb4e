"""Rebalancing recommendations from category allocations."""

from collections.abc import Iterable
from decimal import Decimal

from portfolio_ledger.domain.constants import (
    REBALANCING_THRESHOLD,
    RebalancingActionType,
)
from portfolio_ledger.domain.models import CategoryAllocation, RebalancingAction


def classify_adjustment(adjustment: Decimal) -> RebalancingActionType:
    """Return the action for an adjustment amount.

    Amounts strictly below the threshold in magnitude need no action.
    """
    if abs(adjustment) < REBALANCING_THRESHOLD:
        return RebalancingActionType.NO_ACTION
    if adjustment > 0:
        return RebalancingActionType.BUY
    return RebalancingActionType.SELL


def calculate_adjustments(
    categories: Iterable[CategoryAllocation],
    total_value: Decimal,
) -> list[RebalancingAction]:
    """Compute buy/sell adjustments toward each category's target.

    Categories without a target are omitted. The result is sorted by
    descending adjustment magnitude; equal magnitudes keep input order.

    Args:
        categories: Current allocations, with optional target percentages.
        total_value: Total portfolio value the percentages refer to.

    Returns:
        list[RebalancingAction]: Recommendations, empty when the total is
        not positive.
    """
    if total_value <= 0:
        return []

    actions: list[RebalancingAction] = []
    for category in categories:
        target = category.target_percentage
        if target is None:
            continue
        current_percentage = category.current_value / total_value * 100
        target_value = total_value * target / 100
        adjustment = target_value - category.current_value
        actions.append(
            RebalancingAction(
                category_name=category.name,
                current_value=category.current_value,
                current_percentage=current_percentage,
                target_percentage=target,
                adjustment_amount=adjustment,
                action=classify_adjustment(adjustment),
            )
        )

    return sorted(
        actions,
        key=lambda action: abs(action.adjustment_amount),
        reverse=True,
    )


__all__ = ["calculate_adjustments", "classify_adjustment"]
