"""SQLAlchemy Core schema for the ledger.

Column names match the dataclass fields of the entity each table stores, so
rows map to entities field by field.
"""

from decimal import Decimal
from enum import Enum
import json

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
)
from sqlalchemy.engine import Engine
from sqlalchemy.types import TypeDecorator

from portfolio_ledger.domain.constants import (
    AssetType,
    SavingPlanExecutionMethod,
    SavingPlanFrequency,
    TransactionType,
)
from portfolio_ledger.domain.models import (
    Asset,
    CashFlowOperation,
    Category,
    ExchangeRate,
    Portfolio,
    PriceHistory,
    RegularSavingPlan,
    Snapshot,
    SnapshotAssetValue,
    Transaction,
)


class DecimalText(TypeDecorator):
    """Exact decimal stored as text."""

    impl = String(64)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return str(value)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return Decimal(value)


class DecimalMapJson(TypeDecorator):
    """Mapping of string keys to decimals stored as JSON text."""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return json.dumps({key: str(amount) for key, amount in value.items()})

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return {key: Decimal(amount) for key, amount in json.loads(value).items()}


class EnumValue(TypeDecorator):
    """String enum member stored by value."""

    impl = String(32)
    cache_ok = True

    def __init__(self, enum_type: type[Enum]) -> None:
        super().__init__()
        self.enum_type = enum_type

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return self.enum_type(value).value

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return self.enum_type(value)


metadata = MetaData()


def _id_column() -> Column:
    return Column("id", String(36), primary_key=True)


portfolios = Table(
    "portfolios",
    metadata,
    _id_column(),
    Column("name", String(255), nullable=False),
    Column("description", Text),
    Column("created_date", DateTime, nullable=False),
    Column("target_allocation", DecimalMapJson),
    Column("is_active", Boolean, nullable=False),
)

categories = Table(
    "categories",
    metadata,
    _id_column(),
    Column("name", String(255), nullable=False, unique=True),
    Column("target_allocation_percentage", DecimalText),
    Column("display_order", Integer, nullable=False),
)

assets = Table(
    "assets",
    metadata,
    _id_column(),
    Column("name", String(255), nullable=False),
    Column("platform", String(255), nullable=False),
    Column("asset_type", EnumValue(AssetType), nullable=False),
    Column("currency", String(16), nullable=False),
    Column("notes", Text),
    Column("category_id", String(36), ForeignKey("categories.id")),
    Column("portfolio_id", String(36), ForeignKey("portfolios.id")),
)

transactions = Table(
    "transactions",
    metadata,
    _id_column(),
    Column("asset_id", String(36), ForeignKey("assets.id"), nullable=False),
    Column("transaction_type", EnumValue(TransactionType), nullable=False),
    Column("transaction_date", DateTime, nullable=False),
    Column("quantity", DecimalText, nullable=False),
    Column("price_per_unit", DecimalText, nullable=False),
    Column("total_amount", DecimalText, nullable=False),
    Column("currency", String(16), nullable=False),
    Column("fees", DecimalText),
    Column("notes", Text),
    Column("source_asset_id", String(36), ForeignKey("assets.id")),
    Column("related_transaction_id", String(36)),
)

price_history = Table(
    "price_history",
    metadata,
    _id_column(),
    Column("asset_id", String(36), ForeignKey("assets.id"), nullable=False),
    Column("date", DateTime, nullable=False),
    Column("price", DecimalText, nullable=False),
)

snapshots = Table(
    "snapshots",
    metadata,
    _id_column(),
    Column("date", Date, nullable=False, unique=True),
    Column("created_at", DateTime, nullable=False),
)

snapshot_asset_values = Table(
    "snapshot_asset_values",
    metadata,
    _id_column(),
    Column(
        "snapshot_id",
        String(36),
        ForeignKey("snapshots.id"),
        nullable=False,
    ),
    Column("asset_id", String(36), ForeignKey("assets.id"), nullable=False),
    Column("market_value", DecimalText, nullable=False),
    UniqueConstraint("snapshot_id", "asset_id"),
)

cash_flow_operations = Table(
    "cash_flow_operations",
    metadata,
    _id_column(),
    Column(
        "snapshot_id",
        String(36),
        ForeignKey("snapshots.id"),
        nullable=False,
    ),
    Column("description", String(255), nullable=False),
    Column("amount", DecimalText, nullable=False),
    Column("currency", String(16), nullable=False),
    UniqueConstraint("snapshot_id", "description"),
)

exchange_rates = Table(
    "exchange_rates",
    metadata,
    _id_column(),
    Column(
        "snapshot_id",
        String(36),
        ForeignKey("snapshots.id"),
        nullable=False,
        unique=True,
    ),
    Column("base_currency", String(16), nullable=False),
    Column("rates_json", Text, nullable=False),
    Column("fetch_date", DateTime, nullable=False),
    Column("is_fallback", Boolean, nullable=False),
)

regular_saving_plans = Table(
    "regular_saving_plans",
    metadata,
    _id_column(),
    Column("name", String(255), nullable=False),
    Column("amount", DecimalText, nullable=False),
    Column("frequency", EnumValue(SavingPlanFrequency), nullable=False),
    Column("start_date", Date, nullable=False),
    Column("next_due_date", Date, nullable=False),
    Column(
        "execution_method",
        EnumValue(SavingPlanExecutionMethod),
        nullable=False,
    ),
    Column("is_active", Boolean, nullable=False),
    Column("asset_id", String(36), ForeignKey("assets.id")),
    Column("source_asset_id", String(36), ForeignKey("assets.id")),
)


TABLES_BY_ENTITY: dict[type, Table] = {
    Portfolio: portfolios,
    Category: categories,
    Asset: assets,
    Transaction: transactions,
    PriceHistory: price_history,
    Snapshot: snapshots,
    SnapshotAssetValue: snapshot_asset_values,
    CashFlowOperation: cash_flow_operations,
    ExchangeRate: exchange_rates,
    RegularSavingPlan: regular_saving_plans,
}


def create_schema(engine: Engine) -> None:
    """Create every ledger table that does not exist yet."""
    metadata.create_all(engine)


__all__ = [
    "DecimalText",
    "DecimalMapJson",
    "EnumValue",
    "metadata",
    "TABLES_BY_ENTITY",
    "create_schema",
]
