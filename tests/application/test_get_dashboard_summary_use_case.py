"""Tests for the GetDashboardSummaryUseCase."""

from datetime import date, datetime
from decimal import Decimal
from unittest.mock import MagicMock

from portfolio_ledger.application.ledger_store import LedgerStore
from portfolio_ledger.application.use_cases.get_dashboard_summary import (
    GetDashboardSummaryUseCase,
    closest_snapshot,
    months_before,
)
from portfolio_ledger.domain.models import Snapshot
from portfolio_ledger.domain.services.performance import modified_dietz_return
from portfolio_ledger.infrastructure.in_memory_ledger_repository import (
    InMemoryLedgerRepository,
)


def _store() -> LedgerStore:
    return LedgerStore(
        InMemoryLedgerRepository(logger=MagicMock()),
        logger=MagicMock(),
    )


def test_execute_without_snapshots_returns_none():
    use_case = GetDashboardSummaryUseCase(_store(), logger=MagicMock())

    assert use_case.execute() is None


def test_execute_computes_returns_and_allocation():
    """1000 -> 1200 (+100 deposit) -> 1500 over one year."""
    store = _store()
    stocks = store.create_category("Stocks")
    aapl = store.create_asset("AAPL", "Schwab", category=stocks)
    cash = store.create_asset("Cash", "Bank")
    first = store.create_snapshot(date(2023, 1, 31))
    store.set_asset_value(first, aapl, Decimal("1000"))
    middle = store.create_snapshot(date(2023, 7, 31))
    store.set_asset_value(middle, aapl, Decimal("1200"))
    store.add_cash_flow(middle, "Deposit", Decimal("100"))
    latest = store.create_snapshot(date(2024, 1, 31))
    store.set_asset_value(latest, aapl, Decimal("1000"))
    store.set_asset_value(latest, cash, Decimal("500"))
    store.commit()

    summary = GetDashboardSummaryUseCase(
        store,
        logger=MagicMock(),
        display_currency="USD",
    ).execute(period_months=12)

    assert summary.snapshot_date == date(2024, 1, 31)
    assert summary.total_value == Decimal("1500")
    assert summary.asset_count == 2
    assert summary.period_begin_date == date(2023, 1, 31)
    assert summary.growth_rate == Decimal("0.5")
    assert summary.period_return == modified_dietz_return(
        Decimal("1000"),
        Decimal("1500"),
        [(Decimal("100"), 181)],
        365,
    )
    # (1 + 0.1) * (1 + 0.25) - 1
    assert summary.cumulative_twr == Decimal("0.375")
    assert summary.cagr > Decimal("0.5")
    assert summary.value_history == [
        (date(2023, 1, 31), Decimal("1000")),
        (date(2023, 7, 31), Decimal("1200")),
        (date(2024, 1, 31), Decimal("1500")),
    ]
    assert [share.category_name for share in summary.category_shares] == [
        "Stocks",
        "Uncategorized",
    ]
    assert summary.category_shares[1].value == Decimal("500")


def test_execute_converts_and_skips_missing_rates():
    store = _store()
    tsmc = store.create_asset("TSMC", currency="TWD")
    nesn = store.create_asset("NESN", currency="CHF")
    snapshot = store.create_snapshot(date(2024, 1, 31))
    store.set_asset_value(snapshot, tsmc, Decimal("31500"))
    store.set_asset_value(snapshot, nesn, Decimal("90"))
    store.attach_exchange_rate(
        snapshot,
        "USD",
        {"twd": Decimal("31.5")},
        datetime(2024, 1, 31),
    )
    logger = MagicMock()

    summary = GetDashboardSummaryUseCase(store, logger=logger).execute()

    assert summary.total_value == Decimal("1000")
    assert summary.period_begin_date is None
    assert summary.growth_rate is None
    assert summary.period_return is None
    assert summary.cumulative_twr is None
    assert summary.cagr is None
    assert summary.category_shares[0].percentage == Decimal("100")
    assert logger.warning.called


def test_months_before_clamps_to_month_end():
    assert months_before(date(2024, 3, 31), 1) == date(2024, 2, 29)
    assert months_before(date(2024, 1, 15), 12) == date(2023, 1, 15)
    assert months_before(date(2024, 2, 10), 3) == date(2023, 11, 10)


def test_closest_snapshot_prefers_earlier_on_ties():
    early = Snapshot(date=date(2024, 2, 10))
    late = Snapshot(date=date(2024, 2, 20))

    assert closest_snapshot(date(2024, 2, 15), [late, early]) == early
    assert closest_snapshot(date(2024, 2, 19), [late, early]) == late
    assert closest_snapshot(date(2024, 2, 19), []) is None
