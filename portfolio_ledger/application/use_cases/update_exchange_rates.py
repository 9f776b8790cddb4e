"""Use case applying fetched exchange rates to a snapshot."""

from portfolio_ledger.application.ledger_store import LedgerStore
from portfolio_ledger.application.ports.rate_fetch import RateFetchResult
from portfolio_ledger.domain.models import ExchangeRate, Snapshot
from portfolio_ledger.infrastructure.logging.logger import get_app_logger


class ApplyExchangeRatesUseCase:
    """Store rates supplied by the fetch collaborator on a snapshot."""

    def __init__(self, store: LedgerStore, logger=None) -> None:
        """Initialize the use case.

        Args:
            store: Ledger store holding the snapshot.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._store = store
        self._logger = logger or get_app_logger()

    def execute(
        self,
        snapshot: Snapshot,
        result: RateFetchResult,
    ) -> ExchangeRate:
        """Create or refresh the snapshot's exchange rate and commit.

        Args:
            snapshot: Snapshot the rates belong to.
            result: Rates delivered by the fetcher.

        Returns:
            ExchangeRate: The stored rate record.
        """
        if result.was_fallback:
            self._logger.warning(
                f"Using fallback {result.base_currency} rates fetched "
                f"{result.fetch_date.isoformat()} for snapshot "
                f"{snapshot.date.isoformat()}"
            )
        rate = self._store.attach_exchange_rate(
            snapshot,
            base_currency=result.base_currency,
            rates=result.rates,
            fetch_date=result.fetch_date,
            is_fallback=result.was_fallback,
        )
        self._store.commit()
        self._logger.info(
            f"Applied {len(result.rates)} {result.base_currency} rates to "
            f"snapshot {snapshot.date.isoformat()}"
        )
        return rate


__all__ = ["ApplyExchangeRatesUseCase"]
