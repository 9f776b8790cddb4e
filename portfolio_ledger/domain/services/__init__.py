"""Domain services package."""

from .carry_forward import composite_values
from .fx import (
    can_convert,
    category_values,
    convert_amount,
    effective_currency,
    snapshot_net_cash_flow,
    snapshot_total_value,
)
from .normalization import (
    asset_identity,
    clean_display_name,
    name_identity,
    normalize,
    resolve_asset,
    resolve_by_name,
)
from .performance import (
    cagr,
    category_allocation,
    cumulative_twr,
    growth_rate,
    modified_dietz_return,
)
from .rebalancing import calculate_adjustments, classify_adjustment
from .valuation import (
    average_cost,
    cost_basis,
    current_price,
    current_value,
    is_locked,
    project_holdings,
    quantity,
    quantity_impact,
)

__all__ = [
    "asset_identity",
    "average_cost",
    "cagr",
    "calculate_adjustments",
    "can_convert",
    "category_allocation",
    "category_values",
    "classify_adjustment",
    "clean_display_name",
    "composite_values",
    "convert_amount",
    "cost_basis",
    "cumulative_twr",
    "current_price",
    "current_value",
    "effective_currency",
    "growth_rate",
    "is_locked",
    "modified_dietz_return",
    "name_identity",
    "normalize",
    "project_holdings",
    "quantity",
    "quantity_impact",
    "resolve_asset",
    "resolve_by_name",
    "snapshot_net_cash_flow",
    "snapshot_total_value",
]
