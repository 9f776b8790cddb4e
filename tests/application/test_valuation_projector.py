"""Tests for the ValuationProjector."""

from datetime import datetime
from decimal import Decimal
from unittest.mock import MagicMock

from portfolio_ledger.application.ledger_store import LedgerStore
from portfolio_ledger.application.valuation import ValuationProjector
from portfolio_ledger.domain.constants import TransactionType
from portfolio_ledger.infrastructure.in_memory_ledger_repository import (
    InMemoryLedgerRepository,
)


def _store() -> LedgerStore:
    return LedgerStore(
        InMemoryLedgerRepository(logger=MagicMock()),
        logger=MagicMock(),
    )


def test_projector_recomputes_after_each_write():
    """Figures follow the log without any stored state."""
    store = _store()
    projector = ValuationProjector(store)
    asset = store.create_asset("AAPL", "Schwab")

    store.record_transaction(
        asset,
        TransactionType.BUY,
        datetime(2024, 1, 2),
        Decimal("10"),
        Decimal("100"),
        total_amount=Decimal("1000"),
    )
    store.record_transaction(
        asset,
        TransactionType.SELL,
        datetime(2024, 1, 3),
        Decimal("4"),
        Decimal("120"),
    )
    assert projector.quantity(asset) == Decimal("6")
    assert projector.average_cost(asset) == Decimal("100")
    assert projector.cost_basis(asset) == Decimal("600")
    assert projector.current_value(asset) == Decimal("0")
    assert projector.is_locked(asset) is True

    store.record_price(asset, datetime(2024, 1, 5), Decimal("150"))
    store.record_price(asset, datetime(2024, 1, 4), Decimal("999"))

    assert projector.current_price(asset) == Decimal("150")
    assert projector.current_value(asset) == Decimal("900")
    assert projector.holdings(asset).unrealized_gain == Decimal("300")


def test_total_value_sums_portfolio_assets_only():
    store = _store()
    projector = ValuationProjector(store)
    portfolio = store.create_portfolio("Main")
    inside = store.create_asset("A", portfolio=portfolio)
    outside = store.create_asset("B")
    for asset, price in ((inside, "5"), (outside, "7")):
        store.record_transaction(
            asset,
            TransactionType.BUY,
            datetime(2024, 1, 1),
            Decimal("2"),
            Decimal(price),
        )
        store.record_price(asset, datetime(2024, 1, 1), Decimal(price))

    assert projector.total_value(portfolio) == Decimal("10")
    assert [h.asset_id for h in projector.portfolio_holdings(portfolio)] == [
        inside.id
    ]
