"""Domain models package."""

from .analytics import (
    AssetHoldings,
    CategoryAllocation,
    CompositeAssetValue,
    PortfolioValuation,
    RebalancingAction,
)
from .exchange_rate import ExchangeRate, decode_rates, encode_rates
from .ledger import (
    Asset,
    CashFlowOperation,
    Category,
    Portfolio,
    PriceHistory,
    RegularSavingPlan,
    Snapshot,
    SnapshotAssetValue,
    Transaction,
    new_id,
    start_of_day,
)

LEDGER_ENTITY_TYPES = (
    Portfolio,
    Category,
    Asset,
    Transaction,
    PriceHistory,
    Snapshot,
    SnapshotAssetValue,
    CashFlowOperation,
    ExchangeRate,
    RegularSavingPlan,
)

__all__ = [
    "Asset",
    "AssetHoldings",
    "CashFlowOperation",
    "Category",
    "CategoryAllocation",
    "CompositeAssetValue",
    "ExchangeRate",
    "LEDGER_ENTITY_TYPES",
    "Portfolio",
    "PortfolioValuation",
    "PriceHistory",
    "RebalancingAction",
    "RegularSavingPlan",
    "Snapshot",
    "SnapshotAssetValue",
    "Transaction",
    "decode_rates",
    "encode_rates",
    "new_id",
    "start_of_day",
]
