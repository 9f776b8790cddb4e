"""Database engine helpers for the ledger store."""

import os
from pathlib import Path

import dotenv
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.pool import QueuePool

from portfolio_ledger.application.ports.database import DatabaseEnginePort
from portfolio_ledger.infrastructure.settings import default_db_url


_ledger_engine: Engine | None = None


def _get_env_var(name: str, default: str | None = None) -> str:
    """Return an environment variable after loading .env.

    Args:
        name: Variable name.
        default: Value used when the variable is unset.

    Returns:
        str: Variable value.

    Raises:
        RuntimeError: If the variable is missing and has no default.
    """
    dotenv.load_dotenv()
    value = os.getenv(name, default)
    if not value:
        raise RuntimeError(f"Environment variable {name} is not set.")
    return value


def _ensure_sqlite_directory(db_url: str) -> None:
    url = make_url(db_url)
    if url.get_backend_name() != "sqlite":
        return
    database = url.database
    if not database or database == ":memory:":
        return
    Path(database).expanduser().parent.mkdir(parents=True, exist_ok=True)


def _create_engine(db_url: str) -> Engine:
    """Create an engine for the ledger database.

    Server databases get a health-checked QueuePool; SQLite keeps the
    dialect's default pool.

    Args:
        db_url: SQLAlchemy database URL.

    Returns:
        Engine: Configured engine.
    """
    if make_url(db_url).get_backend_name() == "sqlite":
        _ensure_sqlite_directory(db_url)
        return create_engine(db_url, future=True)
    return create_engine(
        db_url,
        poolclass=QueuePool,
        pool_size=5,
        max_overflow=5,
        pool_pre_ping=True,
        future=True,
    )


def get_ledger_engine() -> Engine:
    """Return the process-wide ledger engine, creating it on first use."""
    global _ledger_engine
    if _ledger_engine is None:
        _ledger_engine = _create_engine(
            _get_env_var("LEDGER_DB_URL", default_db_url())
        )
    return _ledger_engine


class SqlAlchemyDatabaseEngineAdapter(DatabaseEnginePort):
    """Database adapter exposing the module-level engine."""

    def get_ledger_engine(self) -> Engine:
        return get_ledger_engine()


__all__ = [
    "get_ledger_engine",
    "SqlAlchemyDatabaseEngineAdapter",
]
