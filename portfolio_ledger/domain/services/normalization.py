"""Identity normalization and matching helpers."""

import re
from collections.abc import Iterable
from typing import Protocol, TypeVar

from portfolio_ledger.domain.constants import IDENTITY_SEPARATOR


_WHITESPACE_RUN = re.compile(r"\s+")


class _Named(Protocol):
    name: str


class _Placed(Protocol):
    name: str
    platform: str


NamedT = TypeVar("NamedT", bound=_Named)
PlacedT = TypeVar("PlacedT", bound=_Placed)


def normalize(value: str | None) -> str:
    """Trim, collapse internal whitespace runs and lower-case a value.

    Args:
        value: Raw user or import text.

    Returns:
        str: Normalized text; empty for None.
    """
    if not value:
        return ""
    return _WHITESPACE_RUN.sub(" ", value.strip()).lower()


def clean_display_name(value: str | None) -> str:
    """Trim and collapse whitespace while keeping the original casing."""
    if not value:
        return ""
    return _WHITESPACE_RUN.sub(" ", value.strip())


def name_identity(name: str | None) -> str:
    """Return the identity of a category or platform name."""
    return normalize(name)


def asset_identity(name: str | None, platform: str | None) -> str:
    """Return the identity of an asset as ``name|platform``."""
    return f"{normalize(name)}{IDENTITY_SEPARATOR}{normalize(platform)}"


def resolve_by_name(
    candidate_name: str,
    entities: Iterable[NamedT],
) -> NamedT | None:
    """Return the entity whose normalized name matches, if any."""
    target = name_identity(candidate_name)
    for entity in entities:
        if name_identity(entity.name) == target:
            return entity
    return None


def resolve_asset(
    candidate_name: str,
    candidate_platform: str,
    assets: Iterable[PlacedT],
    exclude_id: str | None = None,
) -> PlacedT | None:
    """Return the asset sharing the candidate identity, if any.

    Args:
        candidate_name: Raw asset name.
        candidate_platform: Raw platform.
        assets: Existing assets to search.
        exclude_id: Optional asset id ignored during matching (self on rename).

    Returns:
        The matching asset, or None so the caller may create one.
    """
    target = asset_identity(candidate_name, candidate_platform)
    for asset in assets:
        if exclude_id is not None and getattr(asset, "id", None) == exclude_id:
            continue
        if asset_identity(asset.name, asset.platform) == target:
            return asset
    return None


__all__ = [
    "normalize",
    "clean_display_name",
    "name_identity",
    "asset_identity",
    "resolve_by_name",
    "resolve_asset",
]
