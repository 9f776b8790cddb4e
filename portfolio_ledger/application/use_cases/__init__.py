"""Application use cases package."""

from .delete_transaction import DeleteTransactionUseCase, PendingDeletion
from .get_dashboard_summary import (
    CategoryShare,
    DashboardSummary,
    GetDashboardSummaryUseCase,
)
from .get_portfolio_valuation import GetPortfolioValuationUseCase
from .get_rebalancing import GetRebalancingUseCase, RebalancingView
from .import_snapshot import (
    AssetImportRow,
    CashFlowImportRow,
    ImportIssue,
    ImportResult,
    ImportSnapshotUseCase,
)
from .resolve_or_create_asset import ResolveOrCreateAssetUseCase
from .update_exchange_rates import ApplyExchangeRatesUseCase

__all__ = [
    "ApplyExchangeRatesUseCase",
    "AssetImportRow",
    "CashFlowImportRow",
    "CategoryShare",
    "DashboardSummary",
    "DeleteTransactionUseCase",
    "GetDashboardSummaryUseCase",
    "GetPortfolioValuationUseCase",
    "GetRebalancingUseCase",
    "ImportIssue",
    "ImportResult",
    "ImportSnapshotUseCase",
    "PendingDeletion",
    "RebalancingView",
    "ResolveOrCreateAssetUseCase",
]
