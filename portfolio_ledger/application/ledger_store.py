"""Ledger store: the entity graph and its relationship rules.

Every mutation goes through this class so uniqueness, locking and deletion
guards are checked in application code before anything reaches the
repository. Mutations are staged on the repository and persisted together by
``commit``.
"""

from collections.abc import Mapping
from dataclasses import fields, replace
from datetime import date, datetime
from decimal import Decimal
from typing import TypeVar

from portfolio_ledger.application.ports.ledger_repository import (
    LedgerRepositoryPort,
)
from portfolio_ledger.domain.constants import (
    DEFAULT_CURRENCY,
    AssetType,
    SavingPlanExecutionMethod,
    SavingPlanFrequency,
    TransactionType,
)
from portfolio_ledger.domain.errors import (
    AssetLockedError,
    CannotDeleteReferencedError,
    DuplicateIdentityError,
    EmptyNameError,
    EntityNotFoundError,
    PersistenceError,
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
    encode_rates,
    start_of_day,
)
from portfolio_ledger.domain.policies import (
    target_allocation_warning,
    validate_target_percentage,
)
from portfolio_ledger.domain.services.normalization import (
    clean_display_name,
    name_identity,
    normalize,
    resolve_asset,
    resolve_by_name,
)
from portfolio_ledger.infrastructure.logging.logger import get_app_logger
from portfolio_ledger.utils.decimal_utils import coerce_decimal


EntityT = TypeVar("EntityT")

_EDITABLE_ASSET_FIELDS = frozenset(
    field.name for field in fields(Asset) if field.name != "id"
)
_LOCKED_ASSET_FIELDS = ("asset_type", "currency")


class LedgerStore:
    """Owns every ledger entity and enforces the graph invariants."""

    def __init__(self, repository: LedgerRepositoryPort, logger=None) -> None:
        """Initialize the store.

        Args:
            repository: Port persisting ledger entities.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._repository = repository
        self._logger = logger or get_app_logger()

    # Unit of work

    def commit(self) -> None:
        """Persist every pending change, or none of them.

        Raises:
            PersistenceError: If the repository refuses the commit. Pending
                changes are rolled back first.
        """
        try:
            self._repository.save()
        except PersistenceError:
            self._logger.error("Ledger commit failed; rolling back")
            self._repository.rollback()
            raise

    def rollback(self) -> None:
        self._repository.rollback()

    # Reads

    def get(self, entity_type: type[EntityT], entity_id: str) -> EntityT:
        """Return an entity by id.

        Raises:
            EntityNotFoundError: If no such entity exists.
        """
        entity = self._repository.get(entity_type, entity_id)
        if entity is None:
            raise EntityNotFoundError(entity_type.__name__.lower(), entity_id)
        return entity

    def categories(self) -> list[Category]:
        return sorted(
            self._repository.query(Category),
            key=lambda category: (category.display_order, category.name.lower()),
        )

    def portfolios(self) -> list[Portfolio]:
        return sorted(
            self._repository.query(Portfolio),
            key=lambda portfolio: (portfolio.name.lower(), portfolio.id),
        )

    def assets(self) -> list[Asset]:
        return sorted(
            self._repository.query(Asset),
            key=lambda asset: (
                normalize(asset.name),
                normalize(asset.platform),
                asset.id,
            ),
        )

    def assets_by_id(self) -> dict[str, Asset]:
        return {asset.id: asset for asset in self._repository.query(Asset)}

    def assets_in_portfolio(self, portfolio: Portfolio) -> list[Asset]:
        return [
            asset for asset in self.assets() if asset.portfolio_id == portfolio.id
        ]

    def assets_in_category(self, category: Category) -> list[Asset]:
        return [
            asset for asset in self.assets() if asset.category_id == category.id
        ]

    def transactions_for(self, asset: Asset) -> list[Transaction]:
        """Return an asset's transactions ordered by date."""
        return sorted(
            self._repository.query(
                Transaction,
                lambda transaction: transaction.asset_id == asset.id,
            ),
            key=lambda transaction: (transaction.transaction_date, transaction.id),
        )

    def price_history_for(self, asset: Asset) -> list[PriceHistory]:
        return sorted(
            self._repository.query(
                PriceHistory,
                lambda entry: entry.asset_id == asset.id,
            ),
            key=lambda entry: (entry.date, entry.id),
        )

    def is_locked(self, asset: Asset) -> bool:
        """Return True once an asset has any transaction or price entry."""
        return bool(self.transactions_for(asset)) or bool(
            self.price_history_for(asset)
        )

    def platforms(self) -> list[str]:
        """Return distinct non-empty platforms, first spelling wins."""
        seen: dict[str, str] = {}
        for asset in self.assets():
            key = name_identity(asset.platform)
            if key and key not in seen:
                seen[key] = asset.platform
        return sorted(seen.values(), key=str.lower)

    def snapshots(self) -> list[Snapshot]:
        """Return snapshots in ascending date order."""
        return sorted(
            self._repository.query(Snapshot),
            key=lambda snapshot: snapshot.date,
        )

    def snapshot_on(self, day: date | datetime) -> Snapshot | None:
        target = start_of_day(day)
        matches = self._repository.query(
            Snapshot,
            lambda snapshot: snapshot.date == target,
        )
        return matches[0] if matches else None

    def latest_snapshot(self) -> Snapshot | None:
        snapshots = self.snapshots()
        return snapshots[-1] if snapshots else None

    def asset_values_for(self, snapshot: Snapshot) -> list[SnapshotAssetValue]:
        return self._repository.query(
            SnapshotAssetValue,
            lambda value: value.snapshot_id == snapshot.id,
        )

    def all_asset_values(self) -> list[SnapshotAssetValue]:
        return self._repository.query(SnapshotAssetValue)

    def cash_flows_for(self, snapshot: Snapshot) -> list[CashFlowOperation]:
        return sorted(
            self._repository.query(
                CashFlowOperation,
                lambda operation: operation.snapshot_id == snapshot.id,
            ),
            key=lambda operation: operation.description.lower(),
        )

    def exchange_rate_for(self, snapshot: Snapshot) -> ExchangeRate | None:
        """Return a detached copy of the snapshot's exchange rate.

        Mutating the copy changes nothing in the ledger; rates are written
        through ``attach_exchange_rate``.
        """
        matches = self._repository.query(
            ExchangeRate,
            lambda rate: rate.snapshot_id == snapshot.id,
        )
        return replace(matches[0]) if matches else None

    def saving_plans(self) -> list[RegularSavingPlan]:
        return sorted(
            self._repository.query(RegularSavingPlan),
            key=lambda plan: (plan.next_due_date, plan.name.lower()),
        )

    # Categories

    def create_category(
        self,
        name: str,
        target_allocation: Decimal | None = None,
    ) -> Category:
        """Create a category.

        Raises:
            EmptyNameError: If the name is blank.
            InvalidTargetAllocationError: If the target is outside 0-100.
            DuplicateIdentityError: If a category with the same normalized
                name exists.
        """
        trimmed = self._require_name(name, "category")
        validate_target_percentage(target_allocation)
        self._ensure_unique_category(trimmed, exclude_id=None)
        next_order = max(
            (category.display_order for category in self.categories()),
            default=-1,
        ) + 1
        category = Category(
            name=trimmed,
            target_allocation_percentage=target_allocation,
            display_order=next_order,
        )
        self._repository.insert(category)
        self._logger.info(f"Created category '{trimmed}'")
        return category

    def edit_category(
        self,
        category: Category,
        name: str,
        target_allocation: Decimal | None,
    ) -> Category:
        """Rename a category and set its target allocation."""
        current = self.get(Category, category.id)
        trimmed = self._require_name(name, "category")
        validate_target_percentage(target_allocation)
        self._ensure_unique_category(trimmed, exclude_id=current.id)
        updated = replace(
            current,
            name=trimmed,
            target_allocation_percentage=target_allocation,
        )
        self._repository.update(updated)
        return updated

    def delete_category(self, category: Category) -> None:
        """Delete a category with no assigned assets.

        Raises:
            CannotDeleteReferencedError: If assets still reference it.
        """
        current = self.get(Category, category.id)
        assigned = self.assets_in_category(current)
        if assigned:
            self._logger.warning(
                f"Cannot delete category '{current.name}': "
                f"{len(assigned)} assets assigned"
            )
            raise CannotDeleteReferencedError("category", len(assigned))
        self._repository.delete(current)
        for order, remaining in enumerate(
            other for other in self.categories() if other.id != current.id
        ):
            if remaining.display_order != order:
                self._repository.update(replace(remaining, display_order=order))
        self._logger.info(f"Deleted category '{current.name}'")

    def target_allocation_warning(self) -> str | None:
        return target_allocation_warning(
            category.target_allocation_percentage
            for category in self.categories()
        )

    # Portfolios

    def create_portfolio(
        self,
        name: str,
        description: str | None = None,
        target_allocation: Mapping[AssetType | str, Decimal] | None = None,
    ) -> Portfolio:
        """Create a portfolio with an optional per-asset-type target."""
        trimmed = self._require_name(name, "portfolio")
        targets = None
        if target_allocation is not None:
            targets = {}
            for asset_type, percentage in target_allocation.items():
                value = coerce_decimal(percentage)
                validate_target_percentage(value)
                targets[AssetType(asset_type).value] = value
        portfolio = Portfolio(
            name=trimmed,
            description=description,
            target_allocation=targets,
        )
        self._repository.insert(portfolio)
        self._logger.info(f"Created portfolio '{trimmed}'")
        return portfolio

    def delete_portfolio(self, portfolio: Portfolio) -> None:
        """Delete an empty portfolio.

        Raises:
            CannotDeleteReferencedError: If assets still reference it.
        """
        current = self.get(Portfolio, portfolio.id)
        assigned = self.assets_in_portfolio(current)
        if assigned:
            self._logger.warning(
                f"Cannot delete portfolio '{current.name}': "
                f"contains {len(assigned)} assets"
            )
            raise CannotDeleteReferencedError("portfolio", len(assigned))
        self._repository.delete(current)
        self._logger.info(f"Deleted portfolio '{current.name}'")

    # Assets

    def create_asset(
        self,
        name: str,
        platform: str = "",
        asset_type: AssetType = AssetType.STOCK,
        currency: str = DEFAULT_CURRENCY,
        notes: str | None = None,
        category: Category | None = None,
        portfolio: Portfolio | None = None,
    ) -> Asset:
        """Create an asset with a unique normalized identity.

        The raw name and platform are stored as given.

        Raises:
            EmptyNameError: If the name is blank.
            DuplicateIdentityError: If another asset shares the identity.
        """
        self._require_name(name, "asset")
        self._ensure_unique_asset(name, platform, exclude_id=None)
        asset = Asset(
            name=name,
            platform=platform,
            asset_type=AssetType(asset_type),
            currency=currency,
            notes=notes,
            category_id=self.get(Category, category.id).id if category else None,
            portfolio_id=(
                self.get(Portfolio, portfolio.id).id if portfolio else None
            ),
        )
        self._repository.insert(asset)
        self._logger.info(f"Created asset '{name}' on '{platform}'")
        return asset

    def update_asset(self, asset: Asset, **changes) -> Asset:
        """Edit an asset.

        Args:
            asset: Asset to edit.
            **changes: Asset fields to replace (name, platform, asset_type,
                currency, notes, category_id, portfolio_id).

        Returns:
            Asset: The updated asset.

        Raises:
            EmptyNameError: If the new name is blank.
            DuplicateIdentityError: If the new identity collides with
                another asset.
            AssetLockedError: If the type or currency of a locked asset
                would change.
        """
        unknown = set(changes) - _EDITABLE_ASSET_FIELDS
        if unknown:
            raise TypeError(f"Unknown asset fields: {sorted(unknown)}")
        current = self.get(Asset, asset.id)
        if "asset_type" in changes:
            changes["asset_type"] = AssetType(changes["asset_type"])
        updated = replace(current, **changes)

        if updated.name != current.name:
            self._require_name(updated.name, "asset")
        if (updated.name, updated.platform) != (current.name, current.platform):
            self._ensure_unique_asset(
                updated.name,
                updated.platform,
                exclude_id=current.id,
            )
        for field_name in _LOCKED_ASSET_FIELDS:
            if getattr(updated, field_name) != getattr(current, field_name):
                if self.is_locked(current):
                    raise AssetLockedError(current.name, field_name)
        if updated.category_id is not None:
            self.get(Category, updated.category_id)
        if updated.portfolio_id is not None:
            self.get(Portfolio, updated.portfolio_id)

        self._repository.update(updated)
        return updated

    def rename_asset(
        self,
        asset: Asset,
        new_name: str,
        new_platform: str | None = None,
    ) -> Asset:
        """Change an asset's identity after re-checking uniqueness."""
        changes = {"name": new_name}
        if new_platform is not None:
            changes["platform"] = new_platform
        return self.update_asset(asset, **changes)

    def delete_asset(self, asset: Asset) -> None:
        """Delete an asset with its whole history.

        Transactions, price history and snapshot values go with it; saving
        plans referencing it keep existing with the reference cleared.
        """
        current = self.get(Asset, asset.id)
        transactions = self.transactions_for(current)
        prices = self.price_history_for(current)
        values = self._repository.query(
            SnapshotAssetValue,
            lambda value: value.asset_id == current.id,
        )
        for transaction in transactions:
            self.delete_transaction_unchecked(transaction)
        for entity in [*prices, *values]:
            self._repository.delete(entity)
        for plan in self._repository.query(RegularSavingPlan):
            if current.id not in (plan.asset_id, plan.source_asset_id):
                continue
            self._repository.update(
                replace(
                    plan,
                    asset_id=None if plan.asset_id == current.id else plan.asset_id,
                    source_asset_id=(
                        None
                        if plan.source_asset_id == current.id
                        else plan.source_asset_id
                    ),
                )
            )
        for other in self._repository.query(
            Transaction,
            lambda transaction: transaction.source_asset_id == current.id,
        ):
            self._repository.update(replace(other, source_asset_id=None))
        self._repository.delete(current)
        self._logger.info(
            f"Deleted asset '{current.name}' with {len(transactions)} "
            f"transactions, {len(prices)} prices and {len(values)} values"
        )

    def rename_platform(self, old_name: str, new_name: str) -> int:
        """Rename a platform across every asset using it.

        Returns:
            int: Number of assets updated.

        Raises:
            EmptyNameError: If the new name is blank.
            DuplicateIdentityError: If another platform already has the name.
        """
        cleaned = clean_display_name(new_name)
        if not cleaned:
            raise EmptyNameError("platform")
        all_assets = self.assets()
        if name_identity(cleaned) != name_identity(old_name):
            existing = {
                name_identity(asset.platform)
                for asset in all_assets
                if asset.platform.strip()
            }
            if name_identity(cleaned) in existing:
                raise DuplicateIdentityError("platform", cleaned)

        old_identity = name_identity(old_name)
        to_rename = [
            asset
            for asset in all_assets
            if name_identity(asset.platform) == old_identity
        ]
        for asset in to_rename:
            self._repository.update(replace(asset, platform=cleaned))
        self._logger.info(
            f"Renamed platform '{old_name}' to '{cleaned}' "
            f"on {len(to_rename)} assets"
        )
        return len(to_rename)

    # Transactions and prices

    def record_transaction(
        self,
        asset: Asset,
        transaction_type: TransactionType,
        transaction_date: datetime,
        quantity: Decimal,
        price_per_unit: Decimal,
        total_amount: Decimal | None = None,
        currency: str | None = None,
        fees: Decimal | None = None,
        notes: str | None = None,
        source_asset: Asset | None = None,
        related_transaction: Transaction | None = None,
    ) -> Transaction:
        """Append a transaction to an asset's log.

        ``total_amount`` defaults to quantity times price and ``currency``
        to the asset's currency. A related transaction is linked both ways.
        """
        current = self.get(Asset, asset.id)
        quantity = coerce_decimal(quantity)
        price_per_unit = coerce_decimal(price_per_unit)
        if total_amount is None:
            total_amount = quantity * price_per_unit
        transaction = Transaction(
            asset_id=current.id,
            transaction_type=TransactionType(transaction_type),
            transaction_date=transaction_date,
            quantity=quantity,
            price_per_unit=price_per_unit,
            total_amount=coerce_decimal(total_amount),
            currency=currency or current.currency,
            fees=fees,
            notes=notes,
            source_asset_id=(
                self.get(Asset, source_asset.id).id if source_asset else None
            ),
            related_transaction_id=(
                self.get(Transaction, related_transaction.id).id
                if related_transaction
                else None
            ),
        )
        self._repository.insert(transaction)
        if related_transaction is not None:
            counterpart = self.get(Transaction, related_transaction.id)
            self._repository.update(
                replace(counterpart, related_transaction_id=transaction.id)
            )
        return transaction

    def delete_transaction_unchecked(self, transaction: Transaction) -> None:
        """Remove a transaction without the negative-quantity guard.

        User-initiated deletes go through ``DeleteTransactionUseCase``;
        ``delete_asset`` removes whole logs through here. A linked
        counterpart keeps existing with its link cleared.
        """
        current = self.get(Transaction, transaction.id)
        for other in self._repository.query(
            Transaction,
            lambda candidate: candidate.related_transaction_id == current.id,
        ):
            self._repository.update(replace(other, related_transaction_id=None))
        self._repository.delete(current)

    def record_price(
        self,
        asset: Asset,
        price_date: datetime,
        price: Decimal,
    ) -> PriceHistory:
        current = self.get(Asset, asset.id)
        entry = PriceHistory(
            asset_id=current.id,
            date=price_date,
            price=coerce_decimal(price),
        )
        self._repository.insert(entry)
        return entry

    def delete_price(self, entry: PriceHistory) -> None:
        self._repository.delete(self.get(PriceHistory, entry.id))

    # Snapshots

    def create_snapshot(self, day: date | datetime) -> Snapshot:
        """Create the snapshot of a calendar day.

        Raises:
            DuplicateIdentityError: If that day already has a snapshot.
        """
        target = start_of_day(day)
        if self.snapshot_on(target) is not None:
            raise DuplicateIdentityError("snapshot", target.isoformat())
        snapshot = Snapshot(date=target)
        self._repository.insert(snapshot)
        self._logger.info(f"Created snapshot for {target.isoformat()}")
        return snapshot

    def find_or_create_snapshot(self, day: date | datetime) -> Snapshot:
        existing = self.snapshot_on(day)
        if existing is not None:
            return existing
        return self.create_snapshot(day)

    def delete_snapshot(self, snapshot: Snapshot) -> None:
        """Delete a snapshot with its values, cash flows and rates."""
        current = self.get(Snapshot, snapshot.id)
        children = [
            *self.asset_values_for(current),
            *self.cash_flows_for(current),
        ]
        rate = self.exchange_rate_for(current)
        if rate is not None:
            children.append(rate)
        for child in children:
            self._repository.delete(child)
        self._repository.delete(current)
        self._logger.info(f"Deleted snapshot for {current.date.isoformat()}")

    def set_asset_value(
        self,
        snapshot: Snapshot,
        asset: Asset,
        market_value: Decimal,
    ) -> SnapshotAssetValue:
        """Record an asset's market value on a snapshot, replacing any prior one."""
        current_snapshot = self.get(Snapshot, snapshot.id)
        current_asset = self.get(Asset, asset.id)
        market_value = coerce_decimal(market_value)
        for existing in self.asset_values_for(current_snapshot):
            if existing.asset_id == current_asset.id:
                updated = replace(existing, market_value=market_value)
                self._repository.update(updated)
                return updated
        value = SnapshotAssetValue(
            snapshot_id=current_snapshot.id,
            asset_id=current_asset.id,
            market_value=market_value,
        )
        self._repository.insert(value)
        return value

    def remove_asset_value(self, value: SnapshotAssetValue) -> None:
        self._repository.delete(self.get(SnapshotAssetValue, value.id))

    def add_cash_flow(
        self,
        snapshot: Snapshot,
        description: str,
        amount: Decimal,
        currency: str = "",
    ) -> CashFlowOperation:
        """Record a cash-flow operation on a snapshot.

        Raises:
            EmptyNameError: If the description is blank.
            DuplicateIdentityError: If the snapshot already has an operation
                with the same normalized description.
        """
        current = self.get(Snapshot, snapshot.id)
        trimmed = self._require_name(description, "cash flow")
        if any(
            name_identity(operation.description) == name_identity(trimmed)
            for operation in self.cash_flows_for(current)
        ):
            raise DuplicateIdentityError("cash flow", trimmed)
        operation = CashFlowOperation(
            snapshot_id=current.id,
            description=trimmed,
            amount=coerce_decimal(amount),
            currency=currency,
        )
        self._repository.insert(operation)
        return operation

    def remove_cash_flow(self, operation: CashFlowOperation) -> None:
        self._repository.delete(self.get(CashFlowOperation, operation.id))

    def attach_exchange_rate(
        self,
        snapshot: Snapshot,
        base_currency: str,
        rates: Mapping[str, Decimal],
        fetch_date: datetime,
        is_fallback: bool = False,
    ) -> ExchangeRate:
        """Create or refresh the single exchange rate of a snapshot.

        Returns:
            ExchangeRate: Detached copy of the stored record.
        """
        current = self.get(Snapshot, snapshot.id)
        rate = self.exchange_rate_for(current)
        if rate is None:
            rate = ExchangeRate(
                snapshot_id=current.id,
                base_currency=base_currency,
                rates_json=encode_rates(rates),
                fetch_date=fetch_date,
                is_fallback=is_fallback,
            )
            self._repository.insert(rate)
            return replace(rate)
        rate.update_rates(base_currency, rates, fetch_date)
        rate.is_fallback = is_fallback
        self._repository.update(rate)
        return replace(rate)

    # Saving plans

    def create_saving_plan(
        self,
        name: str,
        amount: Decimal,
        frequency: SavingPlanFrequency,
        start_date: date,
        asset: Asset,
        next_due_date: date | None = None,
        execution_method: SavingPlanExecutionMethod = (
            SavingPlanExecutionMethod.MANUAL
        ),
        source_asset: Asset | None = None,
    ) -> RegularSavingPlan:
        trimmed = self._require_name(name, "saving plan")
        plan = RegularSavingPlan(
            name=trimmed,
            amount=coerce_decimal(amount),
            frequency=SavingPlanFrequency(frequency),
            start_date=start_date,
            next_due_date=next_due_date or start_date,
            execution_method=SavingPlanExecutionMethod(execution_method),
            asset_id=self.get(Asset, asset.id).id,
            source_asset_id=(
                self.get(Asset, source_asset.id).id if source_asset else None
            ),
        )
        self._repository.insert(plan)
        return plan

    def delete_saving_plan(self, plan: RegularSavingPlan) -> None:
        self._repository.delete(self.get(RegularSavingPlan, plan.id))

    # Helpers

    @staticmethod
    def _require_name(name: str | None, kind: str) -> str:
        trimmed = (name or "").strip()
        if not trimmed:
            raise EmptyNameError(kind)
        return trimmed

    def _ensure_unique_category(self, name: str, exclude_id: str | None) -> None:
        others = [
            category
            for category in self._repository.query(Category)
            if category.id != exclude_id
        ]
        if resolve_by_name(name, others) is not None:
            raise DuplicateIdentityError("category", name)

    def _ensure_unique_asset(
        self,
        name: str,
        platform: str,
        exclude_id: str | None,
    ) -> None:
        match = resolve_asset(
            name,
            platform,
            self._repository.query(Asset),
            exclude_id=exclude_id,
        )
        if match is not None:
            raise DuplicateIdentityError("asset", name, platform)


__all__ = ["LedgerStore"]
