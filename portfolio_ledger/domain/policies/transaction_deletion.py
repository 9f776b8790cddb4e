"""Guard protecting the non-negative quantity invariant."""

from collections.abc import Sequence
from decimal import Decimal

from portfolio_ledger.domain.models import Transaction
from portfolio_ledger.domain.services.valuation import quantity, quantity_impact


def quantity_after_deletion(
    transactions: Sequence[Transaction],
    transaction: Transaction,
) -> Decimal:
    """Return the asset quantity once ``transaction`` is removed.

    Args:
        transactions: All transactions of the asset, including ``transaction``.
        transaction: Transaction considered for deletion.

    Returns:
        Decimal: Resulting quantity.
    """
    return quantity(transactions) - quantity_impact(transaction)


def can_delete_transaction(
    transactions: Sequence[Transaction],
    transaction: Transaction,
) -> bool:
    return quantity_after_deletion(transactions, transaction) >= 0


__all__ = ["quantity_after_deletion", "can_delete_transaction"]
