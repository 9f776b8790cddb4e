"""Tests for the composition root."""

from unittest.mock import MagicMock

from sqlalchemy import create_engine, inspect
from sqlalchemy.pool import StaticPool

from portfolio_ledger.application.ledger_store import LedgerStore
from portfolio_ledger.infrastructure import container
from portfolio_ledger.infrastructure.in_memory_ledger_repository import (
    InMemoryLedgerRepository,
)
from portfolio_ledger.infrastructure.settings import LedgerSettings
from portfolio_ledger.infrastructure.sqlalchemy_ledger_repository import (
    SqlAlchemyLedgerRepository,
)


def test_build_ledger_repository_uses_memory_backend() -> None:
    """The memory backend should not touch the database port."""
    db_port = MagicMock()

    repository = container.build_ledger_repository(
        LedgerSettings(backend="memory"),
        db_port=db_port,
    )

    assert isinstance(repository, InMemoryLedgerRepository)
    db_port.get_ledger_engine.assert_not_called()


def test_build_ledger_repository_creates_schema() -> None:
    """The SQL backend should create the ledger tables."""
    engine = create_engine("sqlite://", poolclass=StaticPool)
    db_port = MagicMock()
    db_port.get_ledger_engine.return_value = engine

    repository = container.build_ledger_repository(
        LedgerSettings(backend="sqlalchemy"),
        db_port=db_port,
    )

    assert isinstance(repository, SqlAlchemyLedgerRepository)
    assert "snapshots" in inspect(engine).get_table_names()


def test_use_case_builders_apply_display_currency() -> None:
    """Builders should carry the configured display currency."""
    settings = LedgerSettings(backend="memory", display_currency="EUR")
    store = container.build_ledger_store(settings=settings)

    valuation = container.build_portfolio_valuation_use_case(store, settings)
    rebalancing = container.build_rebalancing_use_case(store, settings)

    assert isinstance(store, LedgerStore)
    assert valuation._display_currency == "EUR"
    assert rebalancing._display_currency == "EUR"
