"""Composite snapshot views with platform-level carry-forward.

A platform that has at least one value in a snapshot is represented only by
those values. Every other platform contributes all asset values from the most
recent prior snapshot in which it appears.
"""

from collections.abc import Iterable, Mapping

from portfolio_ledger.domain.models import (
    Asset,
    CompositeAssetValue,
    Snapshot,
    SnapshotAssetValue,
)
from portfolio_ledger.domain.services.normalization import name_identity


def composite_values(
    snapshot: Snapshot,
    all_snapshots: Iterable[Snapshot],
    all_asset_values: Iterable[SnapshotAssetValue],
    assets: Mapping[str, Asset],
) -> list[CompositeAssetValue]:
    """Return direct and carried-forward values for a snapshot.

    Args:
        snapshot: Snapshot to build the composite view for.
        all_snapshots: Every snapshot, in any order.
        all_asset_values: Pre-fetched values across all snapshots.
        assets: Assets keyed by id.

    Returns:
        list[CompositeAssetValue]: Direct values first, then carried values
        from the most recent prior snapshots.
    """
    values_by_snapshot: dict[str, list[SnapshotAssetValue]] = {}
    for value in all_asset_values:
        if value.asset_id not in assets:
            continue
        values_by_snapshot.setdefault(value.snapshot_id, []).append(value)

    direct_values = values_by_snapshot.get(snapshot.id, [])
    direct_platforms = {
        name_identity(assets[value.asset_id].platform) for value in direct_values
    }
    result = [
        CompositeAssetValue(
            asset=assets[value.asset_id],
            market_value=value.market_value,
            is_carried_forward=False,
        )
        for value in direct_values
    ]

    prior_snapshots = sorted(
        (prior for prior in all_snapshots if prior.date < snapshot.date),
        key=lambda prior: prior.date,
        reverse=True,
    )
    carried_platforms: set[str] = set()
    for prior in prior_snapshots:
        prior_values = values_by_snapshot.get(prior.id, [])
        prior_platforms = set()
        for value in prior_values:
            asset = assets[value.asset_id]
            platform = name_identity(asset.platform)
            prior_platforms.add(platform)
            if platform in direct_platforms or platform in carried_platforms:
                continue
            result.append(
                CompositeAssetValue(
                    asset=asset,
                    market_value=value.market_value,
                    is_carried_forward=True,
                    source_snapshot_date=prior.date,
                )
            )
        carried_platforms |= prior_platforms - direct_platforms
    return result


__all__ = ["composite_values"]
