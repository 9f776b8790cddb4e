"""Tests for composite snapshot values."""

from datetime import date
from decimal import Decimal

from portfolio_ledger.domain.models import Asset, Snapshot, SnapshotAssetValue
from portfolio_ledger.domain.services.carry_forward import composite_values


def _fixture():
    broker_a = Asset(name="AAPL", platform="Broker A")
    broker_a_2 = Asset(name="MSFT", platform="broker a")
    broker_b = Asset(name="Bond", platform="Broker B")
    bank = Asset(name="Savings", platform="Bank")
    assets = {
        asset.id: asset for asset in (broker_a, broker_a_2, broker_b, bank)
    }
    jan = Snapshot(date=date(2024, 1, 31))
    feb = Snapshot(date=date(2024, 2, 29))
    mar = Snapshot(date=date(2024, 3, 31))
    values = [
        SnapshotAssetValue(jan.id, broker_a.id, Decimal("100")),
        SnapshotAssetValue(jan.id, broker_b.id, Decimal("50")),
        SnapshotAssetValue(jan.id, bank.id, Decimal("10")),
        SnapshotAssetValue(feb.id, broker_b.id, Decimal("55")),
        SnapshotAssetValue(mar.id, broker_a_2.id, Decimal("200")),
    ]
    return assets, [mar, jan, feb], values, (broker_a, broker_a_2, broker_b, bank)


def test_absent_platforms_carry_latest_prior_values():
    assets, snapshots, values, (broker_a, broker_a_2, broker_b, bank) = _fixture()
    march = snapshots[0]

    composite = composite_values(march, snapshots, values, assets)

    direct = [value for value in composite if not value.is_carried_forward]
    carried = {
        value.asset.id: value for value in composite if value.is_carried_forward
    }
    assert [value.asset for value in direct] == [broker_a_2]
    # Broker A has a direct value so its January AAPL value is not carried.
    assert broker_a.id not in carried
    assert carried[broker_b.id].market_value == Decimal("55")
    assert carried[broker_b.id].source_snapshot_date == date(2024, 2, 29)
    assert carried[bank.id].market_value == Decimal("10")
    assert carried[bank.id].source_snapshot_date == date(2024, 1, 31)


def test_first_snapshot_has_only_direct_values():
    assets, snapshots, values, _ = _fixture()
    january = snapshots[1]

    composite = composite_values(january, snapshots, values, assets)

    assert all(not value.is_carried_forward for value in composite)
    assert sum(value.market_value for value in composite) == Decimal("160")


def test_composite_values_include_carried_values():
    assets, snapshots, values, _ = _fixture()

    composite = composite_values(snapshots[0], snapshots, values, assets)

    assert sum(value.market_value for value in composite) == Decimal("265")
