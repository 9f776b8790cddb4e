"""Port for persisting ledger entities."""

from typing import Callable, Protocol, TypeVar


EntityT = TypeVar("EntityT")


class LedgerRepositoryPort(Protocol):
    """Unit-of-work style access to ledger entities.

    Mutations are pending until ``save``; reads observe pending changes.
    ``save`` commits every pending change or none of them. A backend that
    checks storage constraints while staging raises ``PersistenceError``
    from the staging call after discarding every pending change.
    """

    def insert(self, entity: object) -> None:
        """Stage a new entity."""

    def update(self, entity: object) -> None:
        """Stage a replacement for an existing entity with the same id."""

    def delete(self, entity: object) -> None:
        """Stage the removal of an entity."""

    def get(self, entity_type: type[EntityT], entity_id: str) -> EntityT | None:
        """Return the entity of the given type and id, if present."""

    def query(
        self,
        entity_type: type[EntityT],
        predicate: Callable[[EntityT], bool] | None = None,
    ) -> list[EntityT]:
        """Return entities of a type matching an optional predicate."""

    def save(self) -> None:
        """Commit pending changes atomically.

        Raises:
            PersistenceError: If the commit fails; nothing is persisted.
        """

    def rollback(self) -> None:
        """Discard pending changes."""


__all__ = ["LedgerRepositoryPort"]
