"""CLI adapter printing a dashboard summary, valuations and rebalancing advice.

Reads the ledger configured through LEDGER_* environment variables. An
optional LEDGER_SNAPSHOT_DATE (YYYY-MM-DD) selects the snapshot; the latest
one is used otherwise.
"""

from datetime import date
import os

from portfolio_ledger.domain.constants import RebalancingActionType
from portfolio_ledger.infrastructure.container import (
    build_dashboard_summary_use_case,
    build_ledger_store,
    build_portfolio_valuation_use_case,
    build_rebalancing_use_case,
)
from portfolio_ledger.infrastructure.logging.logger import get_app_logger
from portfolio_ledger.infrastructure.settings import LedgerSettings


def _parse_date(value: str | None, logger) -> date | None:
    """Parse an ISO date string into a date.

    Args:
        value: Date string in YYYY-MM-DD format.
        logger: Logger used for warnings.

    Returns:
        date | None: Parsed date or None when invalid.
    """
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        logger.warning(
            f"Invalid date '{value}'. Expected format YYYY-MM-DD."
        )
        return None


def _format_rate(value) -> str:
    if value is None:
        return "n/a"
    return f"{value * 100:.2f}%"


def main() -> None:
    """Print the dashboard summary, valuations and rebalancing actions."""
    logger = get_app_logger()
    settings = LedgerSettings.from_env()
    store = build_ledger_store(settings=settings)

    snapshot = None
    snapshot_date = _parse_date(os.getenv("LEDGER_SNAPSHOT_DATE"), logger)
    if snapshot_date is not None:
        snapshot = store.snapshot_on(snapshot_date)
        if snapshot is None:
            logger.warning(f"No snapshot recorded on {snapshot_date}")
            return

    valuation_use_case = build_portfolio_valuation_use_case(store, settings)
    for portfolio in store.portfolios():
        valuation = valuation_use_case.execute(portfolio, snapshot=snapshot)
        print(
            f"{portfolio.name}: {valuation.total_value:.2f} "
            f"{valuation.currency_code} across {len(valuation.holdings)} assets"
        )
        if valuation.unconverted_asset_ids:
            print(
                f"  {len(valuation.unconverted_asset_ids)} assets without "
                "exchange rates are excluded"
            )

    view = build_rebalancing_use_case(store, settings).execute(snapshot)
    if view is None:
        print("No snapshots recorded yet.")
        return

    summary = build_dashboard_summary_use_case(store, settings).execute()
    print(
        f"Dashboard {summary.snapshot_date.isoformat()}: "
        f"{summary.total_value:.2f} {summary.currency_code}, "
        f"growth {_format_rate(summary.growth_rate)}, "
        f"return {_format_rate(summary.period_return)}, "
        f"TWR {_format_rate(summary.cumulative_twr)}, "
        f"CAGR {_format_rate(summary.cagr)}"
    )
    for share in summary.category_shares:
        print(f"  {share.category_name}: {share.percentage:.1f}%")

    print(
        f"Rebalancing for {view.snapshot_date.isoformat()} "
        f"(total={view.total_value:.2f} {view.currency_code})"
    )
    for action in view.actions:
        if action.action == RebalancingActionType.NO_ACTION:
            print(f"  {action.category_name}: on target")
            continue
        print(
            f"  {action.category_name}: {action.action.value} "
            f"{abs(action.adjustment_amount):.2f} "
            f"({action.current_percentage:.1f}% -> "
            f"{action.target_percentage}%)"
        )
    if view.target_warning:
        print(f"  Warning: {view.target_warning}")


if __name__ == "__main__":  # pragma: no cover
    main()
