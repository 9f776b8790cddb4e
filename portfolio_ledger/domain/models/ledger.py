"""Ledger entities.

Entities reference each other by id only; relationships are resolved through
the ledger store. All entities except ``ExchangeRate`` are immutable: edits go
through ``dataclasses.replace`` and ``repository.update``.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from uuid import uuid4

from portfolio_ledger.domain.constants import (
    DEFAULT_CURRENCY,
    AssetType,
    SavingPlanExecutionMethod,
    SavingPlanFrequency,
    TransactionType,
)


def new_id() -> str:
    """Return a fresh entity identifier."""
    return str(uuid4())


def start_of_day(value: date | datetime) -> date:
    """Normalize a date or datetime to its calendar day."""
    if isinstance(value, datetime):
        return value.date()
    return value


@dataclass(frozen=True)
class Portfolio:
    """Named group of assets with an optional per-asset-type target.

    Attributes:
        name: Display name.
        description: Optional free text.
        created_date: Creation timestamp.
        target_allocation: Optional mapping of ``AssetType`` value to percent.
        is_active: Whether the portfolio is in use.
    """

    name: str
    description: str | None = None
    created_date: datetime = field(default_factory=datetime.now)
    target_allocation: dict[str, Decimal] | None = None
    is_active: bool = True
    id: str = field(default_factory=new_id)


@dataclass(frozen=True)
class Category:
    """Allocation bucket referenced by assets."""

    name: str
    target_allocation_percentage: Decimal | None = None
    display_order: int = 0
    id: str = field(default_factory=new_id)


@dataclass(frozen=True)
class Asset:
    """Holding whose quantity and value derive from its transaction log.

    Attributes:
        name: Raw display name.
        platform: Raw platform (broker, bank) completing the identity.
        asset_type: Instrument kind.
        currency: Currency code the asset is priced in.
        notes: Optional free text.
        category_id: Optional category reference.
        portfolio_id: Optional portfolio reference.
    """

    name: str
    platform: str = ""
    asset_type: AssetType = AssetType.STOCK
    currency: str = DEFAULT_CURRENCY
    notes: str | None = None
    category_id: str | None = None
    portfolio_id: str | None = None
    id: str = field(default_factory=new_id)


@dataclass(frozen=True)
class Transaction:
    """Immutable ledger event changing an asset's quantity or income."""

    asset_id: str
    transaction_type: TransactionType
    transaction_date: datetime
    quantity: Decimal
    price_per_unit: Decimal
    total_amount: Decimal
    currency: str = DEFAULT_CURRENCY
    fees: Decimal | None = None
    notes: str | None = None
    source_asset_id: str | None = None
    related_transaction_id: str | None = None
    id: str = field(default_factory=new_id)


@dataclass(frozen=True)
class PriceHistory:
    """Recorded unit price of an asset at a date."""

    asset_id: str
    date: datetime
    price: Decimal
    id: str = field(default_factory=new_id)


@dataclass(frozen=True)
class Snapshot:
    """Dated record of portfolio state."""

    date: date
    created_at: datetime = field(default_factory=datetime.now)
    id: str = field(default_factory=new_id)

    def __post_init__(self) -> None:
        object.__setattr__(self, "date", start_of_day(self.date))


@dataclass(frozen=True)
class SnapshotAssetValue:
    """Market value of one asset as of one snapshot."""

    snapshot_id: str
    asset_id: str
    market_value: Decimal
    id: str = field(default_factory=new_id)


@dataclass(frozen=True)
class CashFlowOperation:
    """External cash movement recorded on a snapshot.

    An empty ``currency`` means the display currency.
    """

    snapshot_id: str
    description: str
    amount: Decimal
    currency: str = ""
    id: str = field(default_factory=new_id)


@dataclass(frozen=True)
class RegularSavingPlan:
    """Recurring contribution into a target asset."""

    name: str
    amount: Decimal
    frequency: SavingPlanFrequency
    start_date: date
    next_due_date: date
    execution_method: SavingPlanExecutionMethod = SavingPlanExecutionMethod.MANUAL
    is_active: bool = True
    asset_id: str | None = None
    source_asset_id: str | None = None
    id: str = field(default_factory=new_id)


__all__ = [
    "new_id",
    "start_of_day",
    "Portfolio",
    "Category",
    "Asset",
    "Transaction",
    "PriceHistory",
    "Snapshot",
    "SnapshotAssetValue",
    "CashFlowOperation",
    "RegularSavingPlan",
]
