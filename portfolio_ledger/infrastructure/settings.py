"""Settings helpers for infrastructure adapters."""

from dataclasses import dataclass
import os

import dotenv

from portfolio_ledger.domain.constants import DEFAULT_CURRENCY
from portfolio_ledger.infrastructure.logging.logger import get_app_logger
from portfolio_ledger.utils.utils import get_project_root


SUPPORTED_BACKENDS = ("sqlalchemy", "memory")


def default_db_url() -> str:
    """Return the SQLite URL used when LEDGER_DB_URL is not set."""
    return f"sqlite:///{get_project_root() / 'data' / 'ledger.db'}"


@dataclass(frozen=True)
class LedgerSettings:
    """Settings for the ledger storage and reporting.

    Attributes:
        backend: Repository backend identifier (sqlalchemy or memory).
        db_url: SQLAlchemy URL of the ledger database.
        display_currency: Currency code reports are converted into.
    """

    backend: str = "sqlalchemy"
    db_url: str | None = None
    display_currency: str = DEFAULT_CURRENCY

    @classmethod
    def from_env(cls) -> "LedgerSettings":
        """Build settings from environment variables.

        Returns:
            LedgerSettings: Settings sourced from environment variables.
        """
        dotenv.load_dotenv()
        logger = get_app_logger()
        backend = os.getenv("LEDGER_BACKEND", "sqlalchemy").strip().lower()
        if backend not in SUPPORTED_BACKENDS:
            logger.warning(
                f"Unknown LEDGER_BACKEND '{backend}', using sqlalchemy"
            )
            backend = "sqlalchemy"
        db_url = os.getenv("LEDGER_DB_URL") or default_db_url()
        display_currency = (
            os.getenv("LEDGER_DISPLAY_CURRENCY", "").strip().upper()
            or DEFAULT_CURRENCY
        )
        return cls(
            backend=backend,
            db_url=db_url,
            display_currency=display_currency,
        )


__all__ = ["LedgerSettings", "SUPPORTED_BACKENDS", "default_db_url"]
