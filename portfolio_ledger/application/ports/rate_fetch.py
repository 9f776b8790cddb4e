"""Contract with the collaborator that fetches exchange rates."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass(frozen=True)
class RateFetchResult:
    """Rates supplied by the external fetcher.

    Attributes:
        base_currency: Currency the rates are relative to.
        rates: Currency code to multiplier, base currency excluded.
        fetch_date: When the rates were obtained.
        was_fallback: True when reused from a previous successful fetch.
    """

    base_currency: str
    rates: dict[str, Decimal]
    fetch_date: datetime
    was_fallback: bool = False


__all__ = ["RateFetchResult"]
