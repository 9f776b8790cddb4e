"""Tests for performance metrics."""

from decimal import Decimal

import pytest

from portfolio_ledger.domain.services.performance import (
    cagr,
    category_allocation,
    cumulative_twr,
    growth_rate,
    modified_dietz_return,
)


def test_growth_rate():
    assert growth_rate(Decimal("100"), Decimal("110")) == Decimal("0.1")
    assert growth_rate(Decimal("0"), Decimal("110")) is None


def test_modified_dietz_without_flows_is_simple_return():
    result = modified_dietz_return(Decimal("1000"), Decimal("1100"), [], 30)

    assert result == Decimal("0.1")


def test_modified_dietz_weights_mid_period_flow():
    """A deposit halfway through counts for half its amount."""
    result = modified_dietz_return(
        Decimal("1000"),
        Decimal("1600"),
        [(Decimal("500"), 15)],
        30,
    )

    assert result == Decimal("100") / Decimal("1250")


def test_modified_dietz_undefined_cases():
    assert modified_dietz_return(Decimal("0"), Decimal("10"), [], 30) is None
    assert modified_dietz_return(Decimal("10"), Decimal("10"), [], 0) is None
    assert (
        modified_dietz_return(
            Decimal("100"),
            Decimal("10"),
            [(Decimal("-300"), 0)],
            30,
        )
        is None
    )


def test_cumulative_twr_chains_returns():
    result = cumulative_twr([Decimal("0.1"), Decimal("-0.1")])

    assert result == Decimal("-0.01")
    assert cumulative_twr([]) == Decimal("0")


def test_cagr():
    result = cagr(Decimal("100"), Decimal("121"), 2)

    assert result == pytest.approx(Decimal("0.1"))
    assert cagr(Decimal("100"), Decimal("0"), 2) is None
    assert cagr(Decimal("100"), Decimal("121"), 0) is None


def test_category_allocation_percent():
    assert category_allocation(Decimal("25"), Decimal("200")) == Decimal("12.5")
    assert category_allocation(Decimal("25"), Decimal("0")) == Decimal("0")
