"""Domain constants and closed enumerations for the ledger."""

from decimal import Decimal
from enum import Enum


class AssetType(str, Enum):
    """Kind of instrument an asset represents."""

    STOCK = "stock"
    BOND = "bond"
    CRYPTO = "crypto"
    REAL_ESTATE = "real_estate"
    COMMODITY = "commodity"
    CASH = "cash"
    MUTUAL_FUND = "mutual_fund"
    ETF = "etf"
    OTHER = "other"


class TransactionType(str, Enum):
    """Kind of ledger event recorded against an asset."""

    BUY = "buy"
    SELL = "sell"
    TRANSFER_IN = "transfer_in"
    TRANSFER_OUT = "transfer_out"
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DIVIDEND = "dividend"
    INTEREST = "interest"
    ADJUSTMENT = "adjustment"


# Every other type adds its quantity; adjustments may carry a negative one.
REDUCING_TRANSACTION_TYPES = frozenset(
    {
        TransactionType.SELL,
        TransactionType.TRANSFER_OUT,
        TransactionType.WITHDRAWAL,
    }
)


class SavingPlanFrequency(str, Enum):
    """Recurrence of a regular saving plan."""

    DAILY = "daily"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"


class SavingPlanExecutionMethod(str, Enum):
    """How a regular saving plan contribution is executed."""

    AUTOMATIC = "automatic"
    MANUAL = "manual"


class RebalancingActionType(str, Enum):
    """Recommended action for a category."""

    BUY = "buy"
    SELL = "sell"
    NO_ACTION = "no_action"


IDENTITY_SEPARATOR = "|"

REBALANCING_THRESHOLD = Decimal("1")

MIN_TARGET_PERCENTAGE = Decimal("0")
MAX_TARGET_PERCENTAGE = Decimal("100")

DEFAULT_CURRENCY = "USD"


__all__ = [
    "AssetType",
    "TransactionType",
    "REDUCING_TRANSACTION_TYPES",
    "SavingPlanFrequency",
    "SavingPlanExecutionMethod",
    "RebalancingActionType",
    "IDENTITY_SEPARATOR",
    "REBALANCING_THRESHOLD",
    "MIN_TARGET_PERCENTAGE",
    "MAX_TARGET_PERCENTAGE",
    "DEFAULT_CURRENCY",
]
