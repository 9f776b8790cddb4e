"""Tests for the ExchangeRate record."""

from datetime import datetime
from decimal import Decimal

import pytest

from portfolio_ledger.domain.models import ExchangeRate, decode_rates, encode_rates


def _rate(rates: dict, base: str = "usd") -> ExchangeRate:
    return ExchangeRate(
        snapshot_id="snap-1",
        base_currency=base,
        rates_json=encode_rates(rates),
        fetch_date=datetime(2024, 1, 1),
    )


def test_convert_from_quote_to_base():
    """31500 TWD at 31.5 per USD is 1000 USD."""
    rate = _rate({"twd": Decimal("31.5")})

    assert rate.convert(Decimal("31500"), "twd", "usd") == Decimal("1000")


def test_convert_same_currency_returns_value_unchanged():
    rate = _rate({})

    assert rate.convert(Decimal("12.34"), "usd", "USD") == Decimal("12.34")
    assert rate.convert(Decimal("5"), "xyz", "XYZ") == Decimal("5")


def test_convert_between_two_quote_currencies():
    rate = _rate({"eur": Decimal("0.5"), "gbp": Decimal("0.25")})

    assert rate.convert(Decimal("10"), "eur", "gbp") == Decimal("5")


def test_convert_returns_none_for_unknown_or_zero_rates():
    rate = _rate({"eur": Decimal("0"), "twd": Decimal("31.5")})

    assert rate.convert(Decimal("10"), "chf", "usd") is None
    assert rate.convert(Decimal("10"), "usd", "chf") is None
    assert rate.convert(Decimal("10"), "eur", "usd") is None


@pytest.mark.parametrize("value", ["1", "1000", "123.45", "0.01"])
def test_conversion_round_trip(value):
    rate = _rate({"twd": Decimal("31.5"), "eur": Decimal("0.92")})
    amount = Decimal(value)

    there = rate.convert(amount, "twd", "eur")
    back = rate.convert(there, "eur", "twd")

    assert abs(back - amount) < Decimal("0.000001")


def test_rates_are_memoized_until_update():
    rate = _rate({"twd": Decimal("31.5")})

    first = rate.rates
    assert rate.rates is first

    rate.update_rates("eur", {"usd": Decimal("1.1")}, datetime(2024, 2, 1))

    assert rate.rates is not first
    assert rate.rates == {"usd": Decimal("1.1")}
    assert rate.base_currency == "eur"
    assert rate.fetch_date == datetime(2024, 2, 1)


def test_update_rates_resets_fallback_flag():
    rate = _rate({"twd": Decimal("31.5")})
    rate.is_fallback = True

    rate.update_rates("usd", {"twd": Decimal("32")}, datetime(2024, 3, 1))

    assert rate.is_fallback is False


def test_encode_lowercases_codes_and_decode_reads_decimals():
    encoded = encode_rates({"TWD": Decimal("31.5"), " Eur ": 0.92})

    assert decode_rates(encoded) == {
        "eur": Decimal("0.92"),
        "twd": Decimal("31.5"),
    }


@pytest.mark.parametrize("payload", ["", "not json", "[1, 2]", "null"])
def test_decode_malformed_payload_is_empty(payload):
    assert decode_rates(payload) == {}
