"""Use case applying parsed import rows to the snapshot of a date."""

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from portfolio_ledger.application.ledger_store import LedgerStore
from portfolio_ledger.application.use_cases.resolve_or_create_asset import (
    ResolveOrCreateAssetUseCase,
)
from portfolio_ledger.domain.constants import DEFAULT_CURRENCY
from portfolio_ledger.domain.errors import LedgerError
from portfolio_ledger.domain.models import Category, Snapshot, start_of_day
from portfolio_ledger.domain.services.normalization import (
    asset_identity,
    name_identity,
)
from portfolio_ledger.infrastructure.logging.logger import get_app_logger


@dataclass(frozen=True)
class AssetImportRow:
    """Parsed asset row. An empty currency means "not given"."""

    name: str
    market_value: Decimal
    platform: str = ""
    currency: str = ""


@dataclass(frozen=True)
class CashFlowImportRow:
    """Parsed cash-flow row."""

    description: str
    amount: Decimal
    currency: str = ""


@dataclass(frozen=True)
class ImportIssue:
    """Problem blocking an import.

    Attributes:
        row: 1-based position of the offending row, None for batch issues.
        message: Human-readable explanation.
    """

    row: int | None
    message: str


@dataclass(frozen=True)
class ImportResult:
    """Outcome of an import.

    Attributes:
        snapshot: Snapshot that received the rows, None when blocked.
        imported_count: Number of rows applied.
        issues: Problems that blocked the import.
    """

    snapshot: Snapshot | None
    imported_count: int = 0
    issues: list[ImportIssue] = field(default_factory=list)


class ImportSnapshotUseCase:
    """Import asset values or cash flows into a dated snapshot.

    Rows are checked first; any issue blocks the whole batch and nothing is
    staged. Otherwise rows are applied and committed together.
    """

    def __init__(
        self,
        store: LedgerStore,
        logger=None,
        default_currency: str = DEFAULT_CURRENCY,
    ) -> None:
        """Initialize the use case.

        Args:
            store: Ledger store receiving the rows.
            logger: Optional logger compatible with logging.Logger-like API.
            default_currency: Currency of assets created without one.
        """
        self._store = store
        self._logger = logger or get_app_logger()
        self._default_currency = default_currency
        self._resolver = ResolveOrCreateAssetUseCase(store, logger=self._logger)

    def validate_assets(
        self,
        snapshot_date: date,
        rows: Sequence[AssetImportRow],
        today: date | None = None,
    ) -> list[ImportIssue]:
        """Return issues for asset rows without staging anything.

        Duplicates are detected within the batch and against values already
        recorded on the snapshot of that date.
        """
        issues = self._date_issues(snapshot_date, today)
        seen: set[str] = set()
        for index, row in enumerate(rows, start=1):
            if not row.name.strip():
                issues.append(ImportIssue(index, "Asset name cannot be empty."))
                continue
            identity = asset_identity(row.name, row.platform)
            if identity in seen:
                issues.append(
                    ImportIssue(
                        index,
                        f"Duplicate asset '{row.name}' (platform: "
                        f"'{row.platform}') in the import.",
                    )
                )
            seen.add(identity)
        existing = self._recorded_asset_identities(snapshot_date)
        for index, row in enumerate(rows, start=1):
            if asset_identity(row.name, row.platform) in existing:
                issues.append(
                    ImportIssue(
                        index,
                        f"Asset '{row.name}' (platform: '{row.platform}') "
                        "already exists in the snapshot for this date.",
                    )
                )
        return issues

    def validate_cash_flows(
        self,
        snapshot_date: date,
        rows: Sequence[CashFlowImportRow],
        today: date | None = None,
    ) -> list[ImportIssue]:
        issues = self._date_issues(snapshot_date, today)
        seen: set[str] = set()
        for index, row in enumerate(rows, start=1):
            key = name_identity(row.description)
            if not key:
                issues.append(
                    ImportIssue(index, "Cash flow description cannot be empty.")
                )
                continue
            if key in seen:
                issues.append(
                    ImportIssue(
                        index,
                        f"Duplicate cash flow '{row.description}' in the import.",
                    )
                )
            seen.add(key)
        snapshot = self._store.snapshot_on(snapshot_date)
        if snapshot is not None:
            existing = {
                name_identity(operation.description)
                for operation in self._store.cash_flows_for(snapshot)
            }
            for index, row in enumerate(rows, start=1):
                if name_identity(row.description) in existing:
                    issues.append(
                        ImportIssue(
                            index,
                            f"Cash flow '{row.description}' already exists "
                            "in the snapshot for this date.",
                        )
                    )
        return issues

    def import_assets(
        self,
        snapshot_date: date,
        rows: Sequence[AssetImportRow],
        category: Category | None = None,
        today: date | None = None,
    ) -> ImportResult:
        """Record asset market values on the snapshot of a date.

        Assets are resolved by identity or created with the row's raw values.
        When a category is given every imported asset is assigned to it.

        Args:
            snapshot_date: Day of the snapshot to create or extend.
            rows: Parsed asset rows.
            category: Optional category assigned to every imported asset.
            today: Reference day for the future-date check.

        Returns:
            ImportResult: Snapshot and count, or the blocking issues.

        Raises:
            EntityNotFoundError: If the category is not in the ledger; nothing
                is staged.
            LedgerError: If applying a row fails; every staged row is
                rolled back.
        """
        issues = self.validate_assets(snapshot_date, rows, today)
        if issues:
            self._logger.warning(
                f"Asset import for {snapshot_date.isoformat()} blocked by "
                f"{len(issues)} issues"
            )
            return ImportResult(snapshot=None, issues=issues)
        if category is not None:
            category = self._store.get(Category, category.id)

        try:
            snapshot = self._store.find_or_create_snapshot(snapshot_date)
            for row in rows:
                asset = self._resolver.execute(
                    name=row.name,
                    platform=row.platform,
                    currency=row.currency or self._default_currency,
                )
                if category is not None and asset.category_id != category.id:
                    asset = self._store.update_asset(
                        asset,
                        category_id=category.id,
                    )
                self._store.set_asset_value(snapshot, asset, row.market_value)
        except LedgerError as exc:
            self._logger.error(
                f"Asset import for {snapshot_date.isoformat()} failed: {exc}"
            )
            self._store.rollback()
            raise
        self._store.commit()
        self._logger.info(
            f"Imported {len(rows)} asset values into snapshot "
            f"{snapshot.date.isoformat()}"
        )
        return ImportResult(snapshot=snapshot, imported_count=len(rows))

    def import_cash_flows(
        self,
        snapshot_date: date,
        rows: Sequence[CashFlowImportRow],
        today: date | None = None,
    ) -> ImportResult:
        """Record cash-flow operations on the snapshot of a date."""
        issues = self.validate_cash_flows(snapshot_date, rows, today)
        if issues:
            self._logger.warning(
                f"Cash flow import for {snapshot_date.isoformat()} blocked by "
                f"{len(issues)} issues"
            )
            return ImportResult(snapshot=None, issues=issues)

        try:
            snapshot = self._store.find_or_create_snapshot(snapshot_date)
            for row in rows:
                self._store.add_cash_flow(
                    snapshot,
                    description=row.description,
                    amount=row.amount,
                    currency=row.currency,
                )
        except LedgerError as exc:
            self._logger.error(
                f"Cash flow import for {snapshot_date.isoformat()} failed: {exc}"
            )
            self._store.rollback()
            raise
        self._store.commit()
        self._logger.info(
            f"Imported {len(rows)} cash flows into snapshot "
            f"{snapshot.date.isoformat()}"
        )
        return ImportResult(snapshot=snapshot, imported_count=len(rows))

    @staticmethod
    def _date_issues(snapshot_date: date, today: date | None) -> list[ImportIssue]:
        reference = today or date.today()
        if start_of_day(snapshot_date) > start_of_day(reference):
            return [ImportIssue(None, "Snapshot date cannot be in the future.")]
        return []

    def _recorded_asset_identities(self, snapshot_date: date) -> set[str]:
        snapshot = self._store.snapshot_on(snapshot_date)
        if snapshot is None:
            return set()
        assets = self._store.assets_by_id()
        identities = set()
        for value in self._store.asset_values_for(snapshot):
            asset = assets.get(value.asset_id)
            if asset is not None:
                identities.add(asset_identity(asset.name, asset.platform))
        return identities


__all__ = [
    "AssetImportRow",
    "CashFlowImportRow",
    "ImportIssue",
    "ImportResult",
    "ImportSnapshotUseCase",
]
