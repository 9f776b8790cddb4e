"""Value objects produced by ledger analytics."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from portfolio_ledger.domain.constants import RebalancingActionType
from portfolio_ledger.domain.models.ledger import Asset


@dataclass(frozen=True)
class AssetHoldings:
    """Live state of an asset derived from its transactions and prices."""

    asset_id: str
    quantity: Decimal
    current_price: Decimal
    current_value: Decimal
    average_cost: Decimal
    cost_basis: Decimal
    is_locked: bool

    @property
    def unrealized_gain(self) -> Decimal:
        """Return current value minus cost basis."""
        return self.current_value - self.cost_basis


@dataclass(frozen=True)
class CategoryAllocation:
    """Input row for rebalancing."""

    name: str
    current_value: Decimal
    target_percentage: Decimal | None = None


@dataclass(frozen=True)
class RebalancingAction:
    """Recommendation for a single category."""

    category_name: str
    current_value: Decimal
    current_percentage: Decimal
    target_percentage: Decimal
    adjustment_amount: Decimal
    action: RebalancingActionType


@dataclass(frozen=True)
class CompositeAssetValue:
    """Asset value in a composite snapshot view.

    Attributes:
        asset: Asset the value belongs to.
        market_value: Recorded market value.
        is_carried_forward: True when taken from a prior snapshot.
        source_snapshot_date: Date of the prior snapshot when carried forward.
    """

    asset: Asset
    market_value: Decimal
    is_carried_forward: bool
    source_snapshot_date: date | None = None


@dataclass(frozen=True)
class PortfolioValuation:
    """Holdings of a portfolio converted to a display currency."""

    portfolio_id: str
    currency_code: str
    holdings: list[AssetHoldings]
    total_value: Decimal
    unconverted_asset_ids: list[str]


__all__ = [
    "AssetHoldings",
    "CategoryAllocation",
    "RebalancingAction",
    "CompositeAssetValue",
    "PortfolioValuation",
]
