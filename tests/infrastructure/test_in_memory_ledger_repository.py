"""Tests for the in-memory ledger repository."""

from dataclasses import replace
from datetime import date
from unittest.mock import MagicMock

import pytest

from portfolio_ledger.domain.errors import PersistenceError
from portfolio_ledger.domain.models import Category, Snapshot
from portfolio_ledger.infrastructure.in_memory_ledger_repository import (
    InMemoryLedgerRepository,
)


def test_reads_observe_pending_changes_until_rollback():
    """Staged entities should be visible before save and gone after rollback."""
    repository = InMemoryLedgerRepository(logger=MagicMock())
    category = Category(name="Stocks")

    repository.insert(category)
    assert repository.get(Category, category.id) == category

    repository.rollback()
    assert repository.get(Category, category.id) is None
    assert repository.query(Category) == []


def test_save_commits_updates_and_deletes():
    """Committed state should survive a later rollback."""
    repository = InMemoryLedgerRepository(logger=MagicMock())
    stocks = Category(name="Stocks")
    bonds = Category(name="Bonds")
    repository.insert(stocks)
    repository.insert(bonds)
    repository.save()

    repository.update(replace(stocks, display_order=3))
    repository.delete(bonds)
    repository.save()
    repository.rollback()

    assert repository.get(Category, stocks.id).display_order == 3
    assert repository.get(Category, bonds.id) is None
    assert repository.query(Category, lambda c: c.name == "Stocks") == [
        replace(stocks, display_order=3)
    ]


def test_save_rejects_unique_violations_and_discards_changes():
    """A violated unique constraint should persist nothing."""
    logger = MagicMock()
    repository = InMemoryLedgerRepository(logger=logger)
    first = Snapshot(date=date(2024, 1, 31))
    repository.insert(first)
    repository.save()

    repository.insert(Snapshot(date=date(2024, 1, 31)))
    repository.insert(Category(name="Cash"))
    with pytest.raises(PersistenceError):
        repository.save()

    assert repository.query(Snapshot) == [first]
    assert repository.query(Category) == []
    logger.error.assert_called_once()
