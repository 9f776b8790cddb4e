"""In-memory repository for ledger entities."""

from dataclasses import replace
from typing import Callable, TypeVar

from portfolio_ledger.application.ports.ledger_repository import (
    LedgerRepositoryPort,
)
from portfolio_ledger.domain.errors import PersistenceError
from portfolio_ledger.domain.models import (
    CashFlowOperation,
    Category,
    ExchangeRate,
    Snapshot,
    SnapshotAssetValue,
)
from portfolio_ledger.infrastructure.logging.logger import get_app_logger


EntityT = TypeVar("EntityT")

# Mirrors the unique constraints of the SQL schema.
UNIQUE_FIELDS: dict[type, tuple[tuple[str, ...], ...]] = {
    Category: (("name",),),
    Snapshot: (("date",),),
    SnapshotAssetValue: (("snapshot_id", "asset_id"),),
    CashFlowOperation: (("snapshot_id", "description"),),
    ExchangeRate: (("snapshot_id",),),
}


def _copy_tables(
    tables: dict[type, dict[str, object]],
) -> dict[type, dict[str, object]]:
    return {
        entity_type: {
            entity_id: replace(entity) for entity_id, entity in rows.items()
        }
        for entity_type, rows in tables.items()
    }


class InMemoryLedgerRepository(LedgerRepositoryPort):
    """Repository keeping a committed state and a working copy.

    Staged changes edit the working copy; ``save`` checks the unique
    constraints and swaps it in, ``rollback`` restores the committed state.
    """

    def __init__(self, logger=None) -> None:
        self._logger = logger or get_app_logger()
        self._committed: dict[type, dict[str, object]] = {}
        self._working: dict[type, dict[str, object]] = {}

    def insert(self, entity: object) -> None:
        self._working.setdefault(type(entity), {})[entity.id] = entity

    def update(self, entity: object) -> None:
        self._working.setdefault(type(entity), {})[entity.id] = entity

    def delete(self, entity: object) -> None:
        self._working.get(type(entity), {}).pop(entity.id, None)

    def get(self, entity_type: type[EntityT], entity_id: str) -> EntityT | None:
        return self._working.get(entity_type, {}).get(entity_id)

    def query(
        self,
        entity_type: type[EntityT],
        predicate: Callable[[EntityT], bool] | None = None,
    ) -> list[EntityT]:
        entities = list(self._working.get(entity_type, {}).values())
        if predicate is None:
            return entities
        return [entity for entity in entities if predicate(entity)]

    def save(self) -> None:
        """Commit the working copy.

        Raises:
            PersistenceError: If a unique constraint is violated; the working
                copy is reset to the committed state.
        """
        violations = self._constraint_violations()
        if violations:
            message = "; ".join(violations)
            self._logger.error(f"Ledger commit failed: {message}")
            self.rollback()
            raise PersistenceError(message)
        self._committed = _copy_tables(self._working)

    def rollback(self) -> None:
        self._working = _copy_tables(self._committed)

    def _constraint_violations(self) -> list[str]:
        violations = []
        for entity_type, constraints in UNIQUE_FIELDS.items():
            rows = self._working.get(entity_type, {}).values()
            for columns in constraints:
                seen = set()
                for entity in rows:
                    key = tuple(getattr(entity, column) for column in columns)
                    if key in seen:
                        violations.append(
                            f"Duplicate {entity_type.__name__} "
                            f"{', '.join(columns)}: {key}"
                        )
                    seen.add(key)
        return violations


__all__ = ["InMemoryLedgerRepository"]
