"""Tests for the GetRebalancingUseCase."""

from datetime import date, datetime
from decimal import Decimal
from unittest.mock import MagicMock

from portfolio_ledger.application.ledger_store import LedgerStore
from portfolio_ledger.application.use_cases.get_rebalancing import (
    GetRebalancingUseCase,
)
from portfolio_ledger.domain.constants import RebalancingActionType
from portfolio_ledger.infrastructure.in_memory_ledger_repository import (
    InMemoryLedgerRepository,
)


def _store() -> LedgerStore:
    return LedgerStore(
        InMemoryLedgerRepository(logger=MagicMock()),
        logger=MagicMock(),
    )


def test_execute_without_snapshots_returns_none():
    assert GetRebalancingUseCase(_store(), logger=MagicMock()).execute() is None


def test_execute_converts_and_carries_forward_values():
    store = _store()
    stocks = store.create_category("Stocks", Decimal("50"))
    bonds = store.create_category("Bonds", Decimal("50"))
    store.create_category("Gold")
    aapl = store.create_asset("AAPL", "Schwab", currency="USD", category=stocks)
    tsmc = store.create_asset("TSMC", "Sinopac", currency="TWD", category=stocks)
    bund = store.create_asset("Bund", "Comdirect", currency="USD", category=bonds)
    loose = store.create_asset("Cash", "Bank", currency="USD")
    january = store.create_snapshot(date(2024, 1, 31))
    store.set_asset_value(january, bund, Decimal("30000"))
    february = store.create_snapshot(date(2024, 2, 29))
    store.set_asset_value(february, aapl, Decimal("40000"))
    store.set_asset_value(february, tsmc, Decimal("945000"))
    store.set_asset_value(february, loose, Decimal("0"))
    store.attach_exchange_rate(
        february,
        "USD",
        {"twd": Decimal("31.5")},
        datetime(2024, 2, 29),
    )

    view = GetRebalancingUseCase(
        store,
        logger=MagicMock(),
        display_currency="USD",
    ).execute()

    assert view.snapshot_date == date(2024, 2, 29)
    assert view.total_value == Decimal("100000")
    assert view.target_warning is None
    by_name = {action.category_name: action for action in view.actions}
    assert set(by_name) == {"Stocks", "Bonds"}
    assert by_name["Stocks"].action == RebalancingActionType.SELL
    assert by_name["Stocks"].adjustment_amount == Decimal("-20000")
    assert by_name["Bonds"].action == RebalancingActionType.BUY
    assert by_name["Bonds"].adjustment_amount == Decimal("20000")


def test_execute_skips_values_without_rates():
    store = _store()
    stocks = store.create_category("Stocks", Decimal("100"))
    tsmc = store.create_asset("TSMC", currency="TWD", category=stocks)
    aapl = store.create_asset("AAPL", currency="USD", category=stocks)
    snapshot = store.create_snapshot(date(2024, 1, 31))
    store.set_asset_value(snapshot, tsmc, Decimal("31500"))
    store.set_asset_value(snapshot, aapl, Decimal("500"))
    logger = MagicMock()

    view = GetRebalancingUseCase(store, logger=logger).execute(snapshot)

    assert view.total_value == Decimal("500")
    assert view.actions[0].action == RebalancingActionType.NO_ACTION
    logger.warning.assert_called_once()
