"""Portfolio performance metrics.

All functions are pure. Undefined results (zero or negative starting values,
empty periods) are reported as None.
"""

from collections.abc import Iterable
from decimal import Decimal


def growth_rate(begin_value: Decimal, end_value: Decimal) -> Decimal | None:
    """Return ``(end - begin) / begin``, or None when begin is not positive."""
    if begin_value <= 0:
        return None
    return (end_value - begin_value) / begin_value


def modified_dietz_return(
    begin_value: Decimal,
    end_value: Decimal,
    cash_flows: Iterable[tuple[Decimal, int]],
    total_days: int,
) -> Decimal | None:
    """Return the Modified Dietz return of a period.

    ``R = (EMV - BMV - CF) / (BMV + sum(w_i * CF_i))`` with
    ``w_i = (total_days - days_since_start_i) / total_days``.

    Args:
        begin_value: Beginning market value.
        end_value: Ending market value.
        cash_flows: ``(amount, days_since_start)`` pairs inside the period.
        total_days: Calendar days in the period.

    Returns:
        Decimal | None: Period return, or None when undefined.
    """
    if begin_value <= 0 or total_days <= 0:
        return None
    flows = list(cash_flows)
    total_flow = sum((amount for amount, _ in flows), Decimal("0"))
    weighted_flow = sum(
        (
            Decimal(total_days - days) / Decimal(total_days) * amount
            for amount, days in flows
        ),
        Decimal("0"),
    )
    denominator = begin_value + weighted_flow
    if denominator <= 0:
        return None
    return (end_value - begin_value - total_flow) / denominator


def cumulative_twr(period_returns: Iterable[Decimal]) -> Decimal:
    """Chain period returns: ``(1 + r1) * ... * (1 + rn) - 1``."""
    product = Decimal("1")
    for period_return in period_returns:
        product *= 1 + period_return
    return product - 1


def cagr(
    begin_value: Decimal,
    end_value: Decimal,
    years: float,
) -> Decimal | None:
    """Return the compound annual growth rate, or None when undefined."""
    if begin_value <= 0 or end_value <= 0 or years <= 0:
        return None
    ratio = float(end_value / begin_value)
    return Decimal(str(ratio ** (1.0 / years) - 1.0))


def category_allocation(
    category_value: Decimal,
    total_value: Decimal,
) -> Decimal:
    """Return the category share of the total in percent (0 for no total)."""
    if total_value <= 0:
        return Decimal("0")
    return category_value / total_value * 100


__all__ = [
    "growth_rate",
    "modified_dietz_return",
    "cumulative_twr",
    "cagr",
    "category_allocation",
]
