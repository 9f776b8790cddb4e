"""Currency conversion helpers built on a snapshot's exchange rate."""

from collections.abc import Iterable, Mapping
from decimal import Decimal
from logging import Logger

from portfolio_ledger.domain.models import (
    Asset,
    CashFlowOperation,
    ExchangeRate,
    SnapshotAssetValue,
)


def effective_currency(currency: str | None, display_currency: str) -> str:
    """Return the currency to convert from, defaulting to the display one."""
    if currency and currency.strip():
        return currency
    return display_currency


def convert_amount(
    value: Decimal,
    from_currency: str,
    to_currency: str,
    exchange_rate: ExchangeRate | None,
) -> Decimal | None:
    """Convert an amount, returning None when rates are unavailable.

    Args:
        value: Amount in ``from_currency``.
        from_currency: Source currency code (any case).
        to_currency: Target currency code (any case).
        exchange_rate: Rates of the relevant snapshot, if any.

    Returns:
        Decimal | None: Converted amount or None.
    """
    if from_currency.strip().lower() == to_currency.strip().lower():
        return value
    if exchange_rate is None:
        return None
    return exchange_rate.convert(value, from_currency, to_currency)


def can_convert(
    from_currency: str,
    to_currency: str,
    exchange_rate: ExchangeRate | None,
) -> bool:
    return (
        convert_amount(Decimal("1"), from_currency, to_currency, exchange_rate)
        is not None
    )


def _convert_or_warn(
    value: Decimal,
    from_currency: str,
    display_currency: str,
    exchange_rate: ExchangeRate | None,
    logger: Logger,
) -> Decimal | None:
    converted = convert_amount(
        value,
        from_currency,
        display_currency,
        exchange_rate,
    )
    if converted is None:
        logger.warning(
            f"Missing FX rate for {from_currency} to {display_currency}"
        )
    return converted


def snapshot_total_value(
    asset_values: Iterable[SnapshotAssetValue],
    assets: Mapping[str, Asset],
    *,
    display_currency: str,
    exchange_rate: ExchangeRate | None,
    logger: Logger,
) -> Decimal:
    """Sum a snapshot's asset values in the display currency.

    Values whose currency cannot be converted are skipped.

    Args:
        asset_values: Values recorded on the snapshot.
        assets: Assets keyed by id.
        display_currency: Currency to report in.
        exchange_rate: Rates attached to the snapshot.
        logger: Logger used for warnings.

    Returns:
        Decimal: Converted total.
    """
    total = Decimal("0")
    for value in asset_values:
        asset = assets.get(value.asset_id)
        currency = effective_currency(
            asset.currency if asset else None,
            display_currency,
        )
        converted = _convert_or_warn(
            value.market_value,
            currency,
            display_currency,
            exchange_rate,
            logger,
        )
        if converted is None:
            continue
        total += converted
    return total


def snapshot_net_cash_flow(
    operations: Iterable[CashFlowOperation],
    *,
    display_currency: str,
    exchange_rate: ExchangeRate | None,
    logger: Logger,
) -> Decimal:
    """Sum a snapshot's cash-flow operations in the display currency."""
    total = Decimal("0")
    for operation in operations:
        converted = _convert_or_warn(
            operation.amount,
            effective_currency(operation.currency, display_currency),
            display_currency,
            exchange_rate,
            logger,
        )
        if converted is None:
            continue
        total += converted
    return total


def category_values(
    values: Iterable[tuple[Asset, Decimal]],
    category_names: Mapping[str, str],
    *,
    display_currency: str,
    exchange_rate: ExchangeRate | None,
    logger: Logger,
) -> dict[str, Decimal]:
    """Group converted asset values by category name.

    Assets without a category are grouped under the empty string.

    Args:
        values: Pairs of asset and market value in the asset's currency.
        category_names: Category name keyed by category id.
        display_currency: Currency to report in.
        exchange_rate: Rates used for conversion.
        logger: Logger used for warnings.

    Returns:
        dict[str, Decimal]: Converted totals per category name.
    """
    totals: dict[str, Decimal] = {}
    for asset, market_value in values:
        converted = _convert_or_warn(
            market_value,
            effective_currency(asset.currency, display_currency),
            display_currency,
            exchange_rate,
            logger,
        )
        if converted is None:
            continue
        name = category_names.get(asset.category_id or "", "")
        totals[name] = totals.get(name, Decimal("0")) + converted
    return totals


__all__ = [
    "effective_currency",
    "convert_amount",
    "can_convert",
    "snapshot_total_value",
    "snapshot_net_cash_flow",
    "category_values",
]
