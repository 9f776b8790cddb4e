"""Composition root for wiring infrastructure adapters."""

from portfolio_ledger.application.ledger_store import LedgerStore
from portfolio_ledger.application.ports.database import DatabaseEnginePort
from portfolio_ledger.application.ports.ledger_repository import (
    LedgerRepositoryPort,
)
from portfolio_ledger.application.use_cases.get_dashboard_summary import (
    GetDashboardSummaryUseCase,
)
from portfolio_ledger.application.use_cases.get_portfolio_valuation import (
    GetPortfolioValuationUseCase,
)
from portfolio_ledger.application.use_cases.get_rebalancing import (
    GetRebalancingUseCase,
)
from portfolio_ledger.infrastructure.db import SqlAlchemyDatabaseEngineAdapter
from portfolio_ledger.infrastructure.in_memory_ledger_repository import (
    InMemoryLedgerRepository,
)
from portfolio_ledger.infrastructure.ledger_tables import create_schema
from portfolio_ledger.infrastructure.logging.logger import get_app_logger
from portfolio_ledger.infrastructure.settings import LedgerSettings
from portfolio_ledger.infrastructure.sqlalchemy_ledger_repository import (
    SqlAlchemyLedgerRepository,
)


def build_database_adapter() -> DatabaseEnginePort:
    """Return the database adapter instance."""
    return SqlAlchemyDatabaseEngineAdapter()


def build_ledger_repository(
    settings: LedgerSettings | None = None,
    db_port: DatabaseEnginePort | None = None,
) -> LedgerRepositoryPort:
    """Return the repository selected by LEDGER_BACKEND."""
    resolved_settings = settings or LedgerSettings.from_env()
    if resolved_settings.backend == "memory":
        return InMemoryLedgerRepository(logger=get_app_logger())
    resolved_db = db_port or build_database_adapter()
    create_schema(resolved_db.get_ledger_engine())
    return SqlAlchemyLedgerRepository(resolved_db, logger=get_app_logger())


def build_ledger_store(
    repository: LedgerRepositoryPort | None = None,
    settings: LedgerSettings | None = None,
) -> LedgerStore:
    """Return a ledger store over the configured repository."""
    resolved_repository = repository or build_ledger_repository(settings)
    return LedgerStore(resolved_repository, logger=get_app_logger())


def build_portfolio_valuation_use_case(
    store: LedgerStore,
    settings: LedgerSettings | None = None,
) -> GetPortfolioValuationUseCase:
    """Return the portfolio valuation use case in the display currency."""
    resolved_settings = settings or LedgerSettings.from_env()
    return GetPortfolioValuationUseCase(
        store,
        logger=get_app_logger(),
        display_currency=resolved_settings.display_currency,
    )


def build_dashboard_summary_use_case(
    store: LedgerStore,
    settings: LedgerSettings | None = None,
) -> GetDashboardSummaryUseCase:
    """Return the dashboard summary use case in the display currency."""
    resolved_settings = settings or LedgerSettings.from_env()
    return GetDashboardSummaryUseCase(
        store,
        logger=get_app_logger(),
        display_currency=resolved_settings.display_currency,
    )


def build_rebalancing_use_case(
    store: LedgerStore,
    settings: LedgerSettings | None = None,
) -> GetRebalancingUseCase:
    """Return the rebalancing use case in the display currency."""
    resolved_settings = settings or LedgerSettings.from_env()
    return GetRebalancingUseCase(
        store,
        logger=get_app_logger(),
        display_currency=resolved_settings.display_currency,
    )


__all__ = [
    "build_database_adapter",
    "build_ledger_repository",
    "build_ledger_store",
    "build_dashboard_summary_use_case",
    "build_portfolio_valuation_use_case",
    "build_rebalancing_use_case",
]
