"""Use case summarizing portfolio performance across snapshots."""

import calendar
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from portfolio_ledger.application.ledger_store import LedgerStore
from portfolio_ledger.domain.constants import DEFAULT_CURRENCY
from portfolio_ledger.domain.models import Snapshot
from portfolio_ledger.domain.services.fx import (
    category_values,
    snapshot_net_cash_flow,
    snapshot_total_value,
)
from portfolio_ledger.domain.services.performance import (
    cagr,
    category_allocation,
    cumulative_twr,
    growth_rate,
    modified_dietz_return,
)
from portfolio_ledger.infrastructure.logging.logger import get_app_logger


UNCATEGORIZED = "Uncategorized"
DAYS_PER_YEAR = 365.25


@dataclass(frozen=True)
class CategoryShare:
    """Converted value of a category and its share of the total."""

    category_name: str
    value: Decimal
    percentage: Decimal


@dataclass(frozen=True)
class DashboardSummary:
    """Headline figures of the ledger in a display currency.

    Attributes:
        snapshot_date: Day of the latest snapshot.
        currency_code: Currency all amounts are expressed in.
        total_value: Converted total of the latest snapshot.
        asset_count: Number of values recorded on the latest snapshot.
        period_begin_date: Day of the snapshot closest to the lookback date.
        growth_rate: Value change over the period, None when undefined.
        period_return: Modified Dietz return over the period.
        cumulative_twr: Chained returns of consecutive snapshots.
        cagr: Compound annual growth from the first snapshot.
        category_shares: Latest allocation sorted by descending value.
        value_history: Converted total per snapshot, oldest first.
    """

    snapshot_date: date
    currency_code: str
    total_value: Decimal
    asset_count: int
    period_begin_date: date | None
    growth_rate: Decimal | None
    period_return: Decimal | None
    cumulative_twr: Decimal | None
    cagr: Decimal | None
    category_shares: list[CategoryShare]
    value_history: list[tuple[date, Decimal]]


def months_before(day: date, months: int) -> date:
    """Return the same day ``months`` earlier, clamped to the month end."""
    month_index = day.year * 12 + day.month - 1 - months
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def closest_snapshot(
    target: date,
    candidates: list[Snapshot],
) -> Snapshot | None:
    """Return the snapshot nearest to ``target``, the earlier one on ties."""
    return min(
        candidates,
        key=lambda snapshot: (abs((snapshot.date - target).days), snapshot.date),
        default=None,
    )


class GetDashboardSummaryUseCase:
    """Compute totals, returns and allocation from recorded snapshots.

    Totals use the values recorded on each snapshot, converted with that
    snapshot's exchange rate. Amounts without a rate are left out.
    """

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

    def execute(self, period_months: int = 12) -> DashboardSummary | None:
        """Return the dashboard summary, or None without snapshots.

        Args:
            period_months: Lookback from the latest snapshot used for the
                growth rate and the period return.

        Returns:
            DashboardSummary | None: Headline figures.
        """
        snapshots = self._store.snapshots()
        if not snapshots:
            self._logger.info("No snapshot available for the dashboard")
            return None

        totals = {snapshot.id: self._total(snapshot) for snapshot in snapshots}
        first, latest = snapshots[0], snapshots[-1]

        period_returns = [
            self._period_return(begin, end, [end], totals) or Decimal("0")
            for begin, end in zip(snapshots, snapshots[1:])
        ]
        begin = closest_snapshot(
            months_before(latest.date, period_months),
            snapshots[:-1],
        )
        summary = DashboardSummary(
            snapshot_date=latest.date,
            currency_code=self._display_currency,
            total_value=totals[latest.id],
            asset_count=len(self._store.asset_values_for(latest)),
            period_begin_date=begin.date if begin else None,
            growth_rate=(
                growth_rate(totals[begin.id], totals[latest.id])
                if begin
                else None
            ),
            period_return=(
                self._period_return(
                    begin,
                    latest,
                    [s for s in snapshots if begin.date < s.date <= latest.date],
                    totals,
                )
                if begin
                else None
            ),
            cumulative_twr=(
                cumulative_twr(period_returns) if len(snapshots) >= 2 else None
            ),
            cagr=(
                cagr(
                    totals[first.id],
                    totals[latest.id],
                    (latest.date - first.date).days / DAYS_PER_YEAR,
                )
                if len(snapshots) >= 2
                else None
            ),
            category_shares=self._category_shares(latest, totals[latest.id]),
            value_history=[
                (snapshot.date, totals[snapshot.id]) for snapshot in snapshots
            ],
        )
        self._logger.info(
            f"Dashboard for {latest.date.isoformat()}: "
            f"total={summary.total_value} {self._display_currency}, "
            f"{len(snapshots)} snapshots"
        )
        return summary

    def _total(self, snapshot: Snapshot) -> Decimal:
        return snapshot_total_value(
            self._store.asset_values_for(snapshot),
            self._store.assets_by_id(),
            display_currency=self._display_currency,
            exchange_rate=self._store.exchange_rate_for(snapshot),
            logger=self._logger,
        )

    def _period_return(
        self,
        begin: Snapshot,
        end: Snapshot,
        flow_snapshots: list[Snapshot],
        totals: dict[str, Decimal],
    ) -> Decimal | None:
        cash_flows = []
        for snapshot in flow_snapshots:
            net_flow = snapshot_net_cash_flow(
                self._store.cash_flows_for(snapshot),
                display_currency=self._display_currency,
                exchange_rate=self._store.exchange_rate_for(snapshot),
                logger=self._logger,
            )
            if net_flow != 0:
                cash_flows.append((net_flow, (snapshot.date - begin.date).days))
        return modified_dietz_return(
            totals[begin.id],
            totals[end.id],
            cash_flows,
            (end.date - begin.date).days,
        )

    def _category_shares(
        self,
        snapshot: Snapshot,
        total: Decimal,
    ) -> list[CategoryShare]:
        if total <= 0:
            return []
        assets = self._store.assets_by_id()
        values = category_values(
            (
                (assets[value.asset_id], value.market_value)
                for value in self._store.asset_values_for(snapshot)
                if value.asset_id in assets
            ),
            {category.id: category.name for category in self._store.categories()},
            display_currency=self._display_currency,
            exchange_rate=self._store.exchange_rate_for(snapshot),
            logger=self._logger,
        )
        shares = [
            CategoryShare(
                category_name=name or UNCATEGORIZED,
                value=value,
                percentage=category_allocation(value, total),
            )
            for name, value in values.items()
        ]
        return sorted(shares, key=lambda share: share.value, reverse=True)


__all__ = [
    "CategoryShare",
    "DashboardSummary",
    "GetDashboardSummaryUseCase",
    "closest_snapshot",
    "months_before",
]
