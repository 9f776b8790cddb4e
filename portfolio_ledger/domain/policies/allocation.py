"""Target allocation policies."""

from collections.abc import Iterable
from decimal import Decimal

from portfolio_ledger.domain.constants import (
    MAX_TARGET_PERCENTAGE,
    MIN_TARGET_PERCENTAGE,
)
from portfolio_ledger.domain.errors import InvalidTargetAllocationError


def validate_target_percentage(value: Decimal | None) -> None:
    """Raise when a target percentage falls outside 0-100.

    Args:
        value: Target percentage, None meaning "no target".

    Raises:
        InvalidTargetAllocationError: If the value is out of range.
    """
    if value is None:
        return
    if value < MIN_TARGET_PERCENTAGE or value > MAX_TARGET_PERCENTAGE:
        raise InvalidTargetAllocationError(value)


def target_allocation_warning(targets: Iterable[Decimal | None]) -> str | None:
    """Return a warning when the set targets do not sum to 100%.

    Returns:
        str | None: Message, or None when no target is set or they sum to 100.
    """
    defined = [target for target in targets if target is not None]
    if not defined:
        return None
    total = sum(defined, Decimal("0"))
    if total == MAX_TARGET_PERCENTAGE:
        return None
    return f"Target allocations sum to {total}% instead of 100%."


__all__ = ["validate_target_percentage", "target_allocation_warning"]
