"""SQLAlchemy-backed repository for ledger entities."""

from dataclasses import fields
from typing import Callable, TypeVar

from sqlalchemy import delete, insert, select, update
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError

from portfolio_ledger.application.ports.database import DatabaseEnginePort
from portfolio_ledger.application.ports.ledger_repository import (
    LedgerRepositoryPort,
)
from portfolio_ledger.domain.errors import PersistenceError
from portfolio_ledger.infrastructure.ledger_tables import TABLES_BY_ENTITY
from portfolio_ledger.infrastructure.logging.logger import get_app_logger


EntityT = TypeVar("EntityT")


def _row_values(entity: object) -> dict:
    return {
        field.name: getattr(entity, field.name)
        for field in fields(entity)
        if field.init
    }


def _to_entity(entity_type: type[EntityT], row) -> EntityT:
    mapping = row._mapping
    return entity_type(
        **{
            field.name: mapping[field.name]
            for field in fields(entity_type)
            if field.init
        }
    )


class SqlAlchemyLedgerRepository(LedgerRepositoryPort):
    """Repository running one database transaction per unit of work.

    Staged statements execute inside an open transaction on a dedicated
    connection, so reads see pending changes; ``save`` commits it.
    """

    def __init__(self, db_port: DatabaseEnginePort, logger=None) -> None:
        """Initialize the repository.

        Args:
            db_port: Port providing access to the ledger engine.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._db_port = db_port
        self._logger = logger or get_app_logger()
        self._connection: Connection | None = None
        self._transaction = None

    def insert(self, entity: object) -> None:
        table = self._table_for(type(entity))
        self._execute(insert(table).values(**_row_values(entity)))

    def update(self, entity: object) -> None:
        table = self._table_for(type(entity))
        values = _row_values(entity)
        entity_id = values.pop("id")
        self._execute(update(table).where(table.c.id == entity_id).values(**values))

    def delete(self, entity: object) -> None:
        table = self._table_for(type(entity))
        self._execute(delete(table).where(table.c.id == entity.id))

    def get(self, entity_type: type[EntityT], entity_id: str) -> EntityT | None:
        table = self._table_for(entity_type)
        row = self._execute(select(table).where(table.c.id == entity_id)).first()
        if row is None:
            return None
        return _to_entity(entity_type, row)

    def query(
        self,
        entity_type: type[EntityT],
        predicate: Callable[[EntityT], bool] | None = None,
    ) -> list[EntityT]:
        table = self._table_for(entity_type)
        rows = self._execute(select(table)).all()
        entities = [_to_entity(entity_type, row) for row in rows]
        if predicate is None:
            return entities
        return [entity for entity in entities if predicate(entity)]

    def save(self) -> None:
        """Commit the open transaction.

        Raises:
            PersistenceError: If the database refuses the commit.
        """
        if self._transaction is None or not self._transaction.is_active:
            return
        try:
            self._transaction.commit()
        except SQLAlchemyError as exc:
            self._logger.error(f"Ledger commit failed: {exc}")
            self.rollback()
            raise PersistenceError(str(exc)) from exc

    def rollback(self) -> None:
        if self._transaction is not None and self._transaction.is_active:
            self._transaction.rollback()
        self._transaction = None

    def close(self) -> None:
        """Discard pending changes and release the connection."""
        self.rollback()
        if self._connection is not None:
            self._connection.close()
            self._connection = None

    def _connect(self) -> Connection:
        if self._connection is None:
            self._connection = self._db_port.get_ledger_engine().connect()
        if not self._connection.in_transaction():
            self._transaction = self._connection.begin()
        return self._connection

    def _execute(self, statement):
        connection = self._connect()
        try:
            return connection.execute(statement)
        except SQLAlchemyError as exc:
            self._logger.error(f"Ledger statement failed: {exc}")
            self.rollback()
            raise PersistenceError(str(exc)) from exc

    @staticmethod
    def _table_for(entity_type: type):
        try:
            return TABLES_BY_ENTITY[entity_type]
        except KeyError as exc:
            raise TypeError(
                f"No table stores {entity_type.__name__} entities"
            ) from exc


__all__ = ["SqlAlchemyLedgerRepository"]
