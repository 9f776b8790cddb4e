"""Guarded two-step deletion of a single transaction."""

from dataclasses import dataclass
from decimal import Decimal

from portfolio_ledger.application.ledger_store import LedgerStore
from portfolio_ledger.domain.errors import WouldCauseNegativeQuantityError
from portfolio_ledger.domain.models import Asset, Transaction
from portfolio_ledger.domain.policies import quantity_after_deletion
from portfolio_ledger.infrastructure.logging.logger import get_app_logger


@dataclass(frozen=True)
class PendingDeletion:
    """Deletion accepted by the guard and awaiting confirmation.

    Attributes:
        transaction: Transaction to delete.
        resulting_quantity: Asset quantity once it is gone.
    """

    transaction: Transaction
    resulting_quantity: Decimal


class DeleteTransactionUseCase:
    """Delete transactions without ever leaving a negative quantity."""

    def __init__(self, store: LedgerStore, logger=None) -> None:
        """Initialize the use case.

        Args:
            store: Ledger store owning the transaction log.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._store = store
        self._logger = logger or get_app_logger()

    def initiate_delete(self, transaction: Transaction) -> PendingDeletion:
        """Check a deletion and return it for confirmation.

        No state changes here.

        Raises:
            WouldCauseNegativeQuantityError: If the asset quantity would drop
                below zero.
        """
        resulting = self._resulting_quantity(transaction)
        if resulting < 0:
            self._logger.warning(
                f"Refused deletion of transaction {transaction.id}: "
                f"quantity would become {resulting}"
            )
            raise WouldCauseNegativeQuantityError(transaction.id, resulting)
        return PendingDeletion(
            transaction=transaction,
            resulting_quantity=resulting,
        )

    def confirm_delete(self, pending: PendingDeletion) -> None:
        """Delete a pending transaction and commit.

        The guard runs again against the current log.

        Raises:
            WouldCauseNegativeQuantityError: If the log changed since
                ``initiate_delete`` and the deletion is no longer safe.
            PersistenceError: If the commit fails.
        """
        checked = self.initiate_delete(pending.transaction)
        self._store.delete_transaction_unchecked(checked.transaction)
        self._store.commit()
        self._logger.info(
            f"Deleted transaction {checked.transaction.id}; "
            f"quantity now {checked.resulting_quantity}"
        )

    def cancel_delete(self, pending: PendingDeletion) -> None:
        self._logger.debug(
            f"Cancelled deletion of transaction {pending.transaction.id}"
        )

    def _resulting_quantity(self, transaction: Transaction) -> Decimal:
        current = self._store.get(Transaction, transaction.id)
        asset = self._store.get(Asset, current.asset_id)
        return quantity_after_deletion(
            self._store.transactions_for(asset),
            current,
        )


__all__ = ["DeleteTransactionUseCase", "PendingDeletion"]
