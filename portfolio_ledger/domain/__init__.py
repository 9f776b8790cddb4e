"""Domain package for ledger rules and core models."""

from .constants import (
    AssetType,
    RebalancingActionType,
    SavingPlanExecutionMethod,
    SavingPlanFrequency,
    TransactionType,
)
from .errors import (
    AssetLockedError,
    CannotDeleteReferencedError,
    DuplicateIdentityError,
    EmptyNameError,
    EntityNotFoundError,
    InvalidTargetAllocationError,
    LedgerError,
    PersistenceError,
    WouldCauseNegativeQuantityError,
)
from .policies import can_delete_transaction, validate_target_percentage
from .services import calculate_adjustments, normalize, project_holdings

__all__ = [
    "AssetType",
    "RebalancingActionType",
    "SavingPlanExecutionMethod",
    "SavingPlanFrequency",
    "TransactionType",
    "AssetLockedError",
    "CannotDeleteReferencedError",
    "DuplicateIdentityError",
    "EmptyNameError",
    "EntityNotFoundError",
    "InvalidTargetAllocationError",
    "LedgerError",
    "PersistenceError",
    "WouldCauseNegativeQuantityError",
    "can_delete_transaction",
    "validate_target_percentage",
    "calculate_adjustments",
    "normalize",
    "project_holdings",
]
