"""Physical asset relocation between data sources (implements IAssetTransferService)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from annoflow.domain.exceptions import AnnoflowException
from annoflow.shared.telemetry.logging import get_logger
from annoflow.shared.telemetry.tracing import traced

if TYPE_CHECKING:
    from annoflow.application.interfaces.repositories import (
        IAssetRepository,
        IDataSourceRepository,
    )
    from annoflow.application.interfaces.services import IStorageService

logger = get_logger(__name__)


class AssetTransferService:
    """Moves an asset's stored object to another data source and repoints the asset.

    Failures are reported as False (and logged) so callers decide whether
    they are fatal; the workflow steps turn them into TransferFailedException.
    """

    def __init__(
        self,
        asset_repo: IAssetRepository,
        data_source_repo: IDataSourceRepository,
        storage: IStorageService,
    ) -> None:
        self._asset_repo = asset_repo
        self._data_source_repo = data_source_repo
        self._storage = storage

    @traced("asset_transfer.transfer_asset_to_data_source")
    async def transfer_asset_to_data_source(
        self, asset_id: str, data_source_id: str
    ) -> bool:
        """Relocate asset_id into data_source_id. True when it ends up there."""
        asset = await self._asset_repo.get_by_id(asset_id)
        if asset is None:
            logger.warning("Cannot transfer missing asset %s", asset_id)
            return False
        if asset.is_in_data_source(data_source_id):
            logger.debug("Asset %s already in data source %s", asset_id, data_source_id)
            return True

        target = await self._data_source_repo.get_by_id(data_source_id)
        if target is None:
            logger.warning(
                "Cannot transfer asset %s: target data source %s not found",
                asset_id,
                data_source_id,
            )
            return False
        source = await self._data_source_repo.get_by_id(asset.data_source_id)
        if source is None:
            logger.warning(
                "Cannot transfer asset %s: source data source %s not found",
                asset_id,
                asset.data_source_id,
            )
            return False

        source_ref = source.object_ref(asset.filename)
        target_ref = target.object_ref(asset.filename)
        try:
            await self._storage.move(source_ref, target_ref)
        except AnnoflowException as e:
            logger.error(
                "Storage move %s -> %s failed for asset %s: %s",
                source_ref,
                target_ref,
                asset_id,
                e.message,
            )
            return False

        try:
            repointed = await self._asset_repo.update_data_source(asset_id, data_source_id)
        except AnnoflowException as e:
            logger.error(
                "Repointing asset %s failed after storage move: %s", asset_id, e.message
            )
            repointed = False
        else:
            if not repointed:
                logger.error("Asset %s disappeared while being transferred", asset_id)
        if not repointed:
            await self._restore_object(asset_id, target_ref, source_ref)
            return False

        logger.info(
            "Transferred asset %s from data source %s to %s",
            asset_id,
            source.id,
            data_source_id,
        )
        return True

    async def _restore_object(self, asset_id: str, moved_ref: str, original_ref: str) -> None:
        """Move the object back so it stays where the asset record says it is."""
        try:
            await self._storage.move(moved_ref, original_ref)
        except AnnoflowException as e:
            logger.critical(
                "Asset %s object stranded at %s (record still points at %s): %s",
                asset_id,
                moved_ref,
                original_ref,
                e.message,
            )
            return
        logger.warning("Moved asset %s object back to %s", asset_id, original_ref)
