"""Use case returning an existing asset by identity or creating it."""

from portfolio_ledger.application.ledger_store import LedgerStore
from portfolio_ledger.domain.constants import DEFAULT_CURRENCY, AssetType
from portfolio_ledger.domain.models import Asset
from portfolio_ledger.domain.services.normalization import resolve_asset
from portfolio_ledger.infrastructure.logging.logger import get_app_logger


class ResolveOrCreateAssetUseCase:
    """Resolve an asset by normalized (name, platform) or create it."""

    def __init__(self, store: LedgerStore, logger=None) -> None:
        """Initialize the use case.

        Args:
            store: Ledger store holding the assets.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._store = store
        self._logger = logger or get_app_logger()

    def execute(
        self,
        name: str,
        platform: str = "",
        asset_type: AssetType = AssetType.STOCK,
        currency: str = DEFAULT_CURRENCY,
    ) -> Asset:
        """Return the asset matching the candidate identity.

        A new asset keeps the raw name and platform; type and currency only
        apply on creation.

        Args:
            name: Raw asset name.
            platform: Raw platform.
            asset_type: Type used when creating.
            currency: Currency used when creating.

        Returns:
            Asset: Existing or newly staged asset.
        """
        existing = resolve_asset(name, platform, self._store.assets())
        if existing is not None:
            self._logger.debug(f"Resolved asset '{name}' to {existing.id}")
            return existing
        return self._store.create_asset(
            name=name,
            platform=platform,
            asset_type=asset_type,
            currency=currency,
        )


__all__ = ["ResolveOrCreateAssetUseCase"]
