"""Live asset valuation read from the ledger store."""

from decimal import Decimal

from portfolio_ledger.application.ledger_store import LedgerStore
from portfolio_ledger.domain.models import Asset, AssetHoldings, Portfolio
from portfolio_ledger.domain.services import valuation


class ValuationProjector:
    """Derive quantity, price and cost figures from an asset's log.

    Values are recomputed on every call; nothing is cached or stored.
    """

    def __init__(self, store: LedgerStore) -> None:
        self._store = store

    def quantity(self, asset: Asset) -> Decimal:
        return valuation.quantity(self._store.transactions_for(asset))

    def current_price(self, asset: Asset) -> Decimal:
        return valuation.current_price(self._store.price_history_for(asset))

    def current_value(self, asset: Asset) -> Decimal:
        return valuation.current_value(
            self._store.transactions_for(asset),
            self._store.price_history_for(asset),
        )

    def average_cost(self, asset: Asset) -> Decimal:
        return valuation.average_cost(self._store.transactions_for(asset))

    def cost_basis(self, asset: Asset) -> Decimal:
        return valuation.cost_basis(self._store.transactions_for(asset))

    def is_locked(self, asset: Asset) -> bool:
        return self._store.is_locked(asset)

    def holdings(self, asset: Asset) -> AssetHoldings:
        """Return every live figure of an asset."""
        return valuation.project_holdings(
            asset.id,
            self._store.transactions_for(asset),
            self._store.price_history_for(asset),
        )

    def portfolio_holdings(self, portfolio: Portfolio) -> list[AssetHoldings]:
        return [
            self.holdings(asset)
            for asset in self._store.assets_in_portfolio(portfolio)
        ]

    def total_value(self, portfolio: Portfolio) -> Decimal:
        """Return the unconverted sum of current values in a portfolio."""
        return sum(
            (
                holdings.current_value
                for holdings in self.portfolio_holdings(portfolio)
            ),
            Decimal("0"),
        )


__all__ = ["ValuationProjector"]
