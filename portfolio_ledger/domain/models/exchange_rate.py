"""Exchange-rate record attached to a snapshot."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation
import json
from typing import Mapping

from portfolio_ledger.domain.models.ledger import new_id
from portfolio_ledger.utils.decimal_utils import coerce_decimal


def encode_rates(rates: Mapping[str, Decimal | float]) -> str:
    """Serialize a rate table as a JSON object of lower-cased codes.

    Args:
        rates: Mapping of currency code to multiplier relative to the base.

    Returns:
        str: JSON text with sorted keys.
    """
    payload = {code.strip().lower(): float(rate) for code, rate in rates.items()}
    return json.dumps(payload, sort_keys=True)


def decode_rates(rates_json: str) -> dict[str, Decimal]:
    """Decode a serialized rate table.

    Malformed payloads decode to an empty table so conversion reports the
    rate as unavailable instead of failing.

    Args:
        rates_json: JSON text produced by ``encode_rates``.

    Returns:
        dict[str, Decimal]: Lower-cased currency code to multiplier.
    """
    try:
        raw = json.loads(rates_json, parse_float=Decimal)
    except (TypeError, ValueError):
        return {}
    if not isinstance(raw, dict):
        return {}
    rates: dict[str, Decimal] = {}
    for code, value in raw.items():
        try:
            rates[str(code).lower()] = coerce_decimal(value)
        except InvalidOperation:
            continue
    return rates


@dataclass(eq=False)
class ExchangeRate:
    """Rates relative to one unit of ``base_currency``.

    The base currency is implicitly 1.0 and never stored in the table.
    ``is_fallback`` marks rates reused from a previous fetch; it never blocks
    conversion.
    """

    snapshot_id: str
    base_currency: str
    rates_json: str
    fetch_date: datetime
    is_fallback: bool = False
    id: str = field(default_factory=new_id)
    _cached_rates: dict[str, Decimal] | None = field(
        default=None,
        init=False,
        repr=False,
    )

    @property
    def rates(self) -> dict[str, Decimal]:
        """Decoded rate table, memoized until ``update_rates``."""
        if self._cached_rates is None:
            self._cached_rates = decode_rates(self.rates_json)
        return self._cached_rates

    def update_rates(
        self,
        base_currency: str,
        rates: Mapping[str, Decimal | float] | str,
        fetch_date: datetime,
    ) -> None:
        """Replace the base, table and fetch date in one step.

        Args:
            base_currency: New base currency code.
            rates: New rate table, as a mapping or already encoded JSON.
            fetch_date: When the rates were fetched.
        """
        self.base_currency = base_currency
        self.rates_json = rates if isinstance(rates, str) else encode_rates(rates)
        self.fetch_date = fetch_date
        self.is_fallback = False
        self._cached_rates = None

    def rate_for(self, currency: str) -> Decimal | None:
        """Return the multiplier for a currency, or None when unknown."""
        code = currency.strip().lower()
        if code == self.base_currency.strip().lower():
            return Decimal("1")
        return self.rates.get(code)

    def convert(
        self,
        value: Decimal,
        from_currency: str,
        to_currency: str,
    ) -> Decimal | None:
        """Convert ``value`` between two currencies.

        Formula: ``value / rate[from] * rate[to]``.

        Returns:
            Decimal | None: Converted value, or None when either rate is
            unavailable or the source rate is zero.
        """
        if from_currency.strip().lower() == to_currency.strip().lower():
            return value
        from_rate = self.rate_for(from_currency)
        if from_rate is None:
            return None
        to_rate = self.rate_for(to_currency)
        if to_rate is None:
            return None
        if from_rate == 0:
            return None
        return coerce_decimal(value) / from_rate * to_rate


__all__ = ["ExchangeRate", "encode_rates", "decode_rates"]
