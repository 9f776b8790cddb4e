"""Application ports package."""

from .database import DatabaseEnginePort
from .ledger_repository import LedgerRepositoryPort
from .rate_fetch import RateFetchResult

__all__ = [
    "DatabaseEnginePort",
    "LedgerRepositoryPort",
    "RateFetchResult",
]
