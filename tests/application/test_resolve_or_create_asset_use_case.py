"""Tests for the ResolveOrCreateAssetUseCase."""

from unittest.mock import MagicMock

from portfolio_ledger.application.ledger_store import LedgerStore
from portfolio_ledger.application.use_cases.resolve_or_create_asset import (
    ResolveOrCreateAssetUseCase,
)
from portfolio_ledger.domain.constants import AssetType
from portfolio_ledger.infrastructure.in_memory_ledger_repository import (
    InMemoryLedgerRepository,
)


def test_execute_returns_existing_asset_for_equivalent_identity():
    store = LedgerStore(
        InMemoryLedgerRepository(logger=MagicMock()),
        logger=MagicMock(),
    )
    use_case = ResolveOrCreateAssetUseCase(store, logger=MagicMock())
    existing = store.create_asset("Apple Inc", "Schwab")

    resolved = use_case.execute("  APPLE   inc", " schwab ")

    assert resolved.id == existing.id
    assert len(store.assets()) == 1


def test_execute_creates_with_raw_values():
    store = LedgerStore(
        InMemoryLedgerRepository(logger=MagicMock()),
        logger=MagicMock(),
    )
    use_case = ResolveOrCreateAssetUseCase(store, logger=MagicMock())
    store.create_asset("Apple Inc", "Schwab")

    created = use_case.execute(
        " Apple Inc ",
        "Fidelity",
        asset_type=AssetType.STOCK,
        currency="EUR",
    )

    assert created.name == " Apple Inc "
    assert created.platform == "Fidelity"
    assert created.currency == "EUR"
    assert len(store.assets()) == 2
