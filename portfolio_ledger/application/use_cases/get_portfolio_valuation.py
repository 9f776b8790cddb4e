"""Use case valuing a portfolio's holdings in a display currency."""

from decimal import Decimal

from portfolio_ledger.application.ledger_store import LedgerStore
from portfolio_ledger.application.valuation import ValuationProjector
from portfolio_ledger.domain.constants import DEFAULT_CURRENCY
from portfolio_ledger.domain.models import Portfolio, PortfolioValuation, Snapshot
from portfolio_ledger.domain.services.fx import convert_amount, effective_currency
from portfolio_ledger.infrastructure.logging.logger import get_app_logger


class GetPortfolioValuationUseCase:
    """Compute live holdings of a portfolio and their converted total."""

    def __init__(
        self,
        store: LedgerStore,
        logger=None,
        display_currency: str = DEFAULT_CURRENCY,
    ) -> None:
        """Initialize the use case.

        Args:
            store: Ledger store to read from.
            logger: Optional logger compatible with logging.Logger-like API.
            display_currency: Currency to report the total in.
        """
        self._store = store
        self._logger = logger or get_app_logger()
        self._display_currency = display_currency
        self._projector = ValuationProjector(store)

    def execute(
        self,
        portfolio: Portfolio,
        snapshot: Snapshot | None = None,
    ) -> PortfolioValuation:
        """Return holdings and the converted portfolio total.

        Rates come from the given snapshot, the latest one by default.
        Holdings whose currency cannot be converted are listed in
        ``unconverted_asset_ids`` and left out of the total.

        Args:
            portfolio: Portfolio to value.
            snapshot: Optional snapshot providing exchange rates.

        Returns:
            PortfolioValuation: Holdings in asset currency, total converted.
        """
        snapshot = snapshot or self._store.latest_snapshot()
        exchange_rate = (
            self._store.exchange_rate_for(snapshot) if snapshot else None
        )

        holdings = []
        unconverted: list[str] = []
        total = Decimal("0")
        for asset in self._store.assets_in_portfolio(portfolio):
            asset_holdings = self._projector.holdings(asset)
            holdings.append(asset_holdings)
            converted = convert_amount(
                asset_holdings.current_value,
                effective_currency(asset.currency, self._display_currency),
                self._display_currency,
                exchange_rate,
            )
            if converted is None:
                self._logger.warning(
                    f"Missing FX rate for {asset.currency} to "
                    f"{self._display_currency}; skipping '{asset.name}'"
                )
                unconverted.append(asset.id)
                continue
            total += converted

        self._logger.info(
            f"Portfolio '{portfolio.name}' valued at {total} "
            f"{self._display_currency}"
        )
        return PortfolioValuation(
            portfolio_id=portfolio.id,
            currency_code=self._display_currency,
            holdings=holdings,
            total_value=total,
            unconverted_asset_ids=unconverted,
        )


__all__ = ["GetPortfolioValuationUseCase"]
