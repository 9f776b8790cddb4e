"""Use case computing rebalancing recommendations for a snapshot."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from portfolio_ledger.application.ledger_store import LedgerStore
from portfolio_ledger.domain.constants import DEFAULT_CURRENCY
from portfolio_ledger.domain.models import (
    CategoryAllocation,
    RebalancingAction,
    Snapshot,
)
from portfolio_ledger.domain.services.carry_forward import composite_values
from portfolio_ledger.domain.services.fx import category_values
from portfolio_ledger.domain.services.rebalancing import calculate_adjustments
from portfolio_ledger.infrastructure.logging.logger import get_app_logger


@dataclass(frozen=True)
class RebalancingView:
    """Recommendations for one snapshot.

    Attributes:
        snapshot_date: Day of the snapshot the values come from.
        currency_code: Currency all amounts are expressed in.
        total_value: Converted total, uncategorized assets included.
        actions: Recommendations sorted by adjustment magnitude.
        uncategorized_value: Converted value of assets without a category.
        target_warning: Message when the targets do not sum to 100%.
    """

    snapshot_date: date
    currency_code: str
    total_value: Decimal
    actions: list[RebalancingAction]
    uncategorized_value: Decimal
    target_warning: str | None = None


class GetRebalancingUseCase:
    """Build category allocations from a snapshot and rebalance them."""

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
            display_currency: Currency to report amounts in.
        """
        self._store = store
        self._logger = logger or get_app_logger()
        self._display_currency = display_currency

    def execute(self, snapshot: Snapshot | None = None) -> RebalancingView | None:
        """Return recommendations for a snapshot, the latest by default.

        Values include platforms carried forward from earlier snapshots.
        Amounts that cannot be converted are left out.

        Returns:
            RebalancingView | None: Recommendations, or None without snapshots.
        """
        snapshot = snapshot or self._store.latest_snapshot()
        if snapshot is None:
            self._logger.info("No snapshot available for rebalancing")
            return None

        composite = composite_values(
            snapshot,
            self._store.snapshots(),
            self._store.all_asset_values(),
            self._store.assets_by_id(),
        )
        categories = self._store.categories()
        totals = category_values(
            ((value.asset, value.market_value) for value in composite),
            {category.id: category.name for category in categories},
            display_currency=self._display_currency,
            exchange_rate=self._store.exchange_rate_for(snapshot),
            logger=self._logger,
        )
        total_value = sum(totals.values(), Decimal("0"))
        allocations = [
            CategoryAllocation(
                name=category.name,
                current_value=totals.get(category.name, Decimal("0")),
                target_percentage=category.target_allocation_percentage,
            )
            for category in categories
        ]
        actions = calculate_adjustments(allocations, total_value)
        self._logger.info(
            f"Rebalancing for {snapshot.date.isoformat()}: "
            f"{len(actions)} categories, total={total_value}"
        )
        return RebalancingView(
            snapshot_date=snapshot.date,
            currency_code=self._display_currency,
            total_value=total_value,
            actions=actions,
            uncategorized_value=totals.get("", Decimal("0")),
            target_warning=self._store.target_allocation_warning(),
        )


__all__ = ["GetRebalancingUseCase", "RebalancingView"]
