"""Pure valuation functions over an asset's transaction and price log.

Nothing computed here is stored; callers recompute on every read.
"""

from collections.abc import Iterable, Sequence
from decimal import Decimal

from portfolio_ledger.domain.constants import (
    REDUCING_TRANSACTION_TYPES,
    TransactionType,
)
from portfolio_ledger.domain.models import (
    AssetHoldings,
    PriceHistory,
    Transaction,
)


def quantity_impact(transaction: Transaction) -> Decimal:
    """Return the signed contribution of a transaction to held quantity.

    Acquiring types add their quantity, reducing types subtract it and
    adjustments contribute their signed quantity as recorded.
    """
    if transaction.transaction_type in REDUCING_TRANSACTION_TYPES:
        return -transaction.quantity
    return transaction.quantity


def quantity(transactions: Iterable[Transaction]) -> Decimal:
    return sum(
        (quantity_impact(transaction) for transaction in transactions),
        Decimal("0"),
    )


def current_price(price_history: Iterable[PriceHistory]) -> Decimal:
    """Return the price of the latest entry, or 0 when none exist."""
    latest = max(price_history, key=lambda entry: entry.date, default=None)
    if latest is None:
        return Decimal("0")
    return latest.price


def current_value(
    transactions: Sequence[Transaction],
    price_history: Sequence[PriceHistory],
) -> Decimal:
    return quantity(transactions) * current_price(price_history)


def average_cost(transactions: Iterable[Transaction]) -> Decimal:
    """Return total spent per unit bought over buy transactions.

    Returns:
        Decimal: Average cost, or 0 when nothing was bought.
    """
    total_amount = Decimal("0")
    total_quantity = Decimal("0")
    for transaction in transactions:
        if transaction.transaction_type != TransactionType.BUY:
            continue
        total_amount += transaction.total_amount
        total_quantity += transaction.quantity
    if total_quantity == 0:
        return Decimal("0")
    return total_amount / total_quantity


def cost_basis(transactions: Sequence[Transaction]) -> Decimal:
    return average_cost(transactions) * quantity(transactions)


def is_locked(
    transactions: Sequence[Transaction],
    price_history: Sequence[PriceHistory],
) -> bool:
    """Return True once any transaction or price has been recorded."""
    return bool(transactions) or bool(price_history)


def project_holdings(
    asset_id: str,
    transactions: Sequence[Transaction],
    price_history: Sequence[PriceHistory],
) -> AssetHoldings:
    """Derive every live figure of an asset in one pass over its log.

    Args:
        asset_id: Asset the log belongs to.
        transactions: All transactions of the asset.
        price_history: All price entries of the asset.

    Returns:
        AssetHoldings: Quantity, price, value and cost figures.
    """
    held = quantity(transactions)
    price = current_price(price_history)
    avg_cost = average_cost(transactions)
    return AssetHoldings(
        asset_id=asset_id,
        quantity=held,
        current_price=price,
        current_value=held * price,
        average_cost=avg_cost,
        cost_basis=avg_cost * held,
        is_locked=is_locked(transactions, price_history),
    )


__all__ = [
    "quantity_impact",
    "quantity",
    "current_price",
    "current_value",
    "average_cost",
    "cost_basis",
    "is_locked",
    "project_holdings",
]
