"""Pipeline step that relocates the asset between data sources bound to workflow stages."""

from __future__ import annotations

from typing import TYPE_CHECKING

from annoflow.domain.exceptions import PreconditionException, TransferFailedException
from annoflow.shared.telemetry.logging import get_logger

if TYPE_CHECKING:
    from annoflow.application.interfaces.services import (
        IAssetTransferService,
        IDataSourceProvisioningService,
    )
    from annoflow.application.workflow.context import PipelineContext

logger = get_logger(__name__)


class AssetTransferStep:
    """Moves context.asset forward to the target stage, or back to annotation on veto."""

    name = "AssetTransferStep"

    def __init__(
        self,
        transfer_service: IAssetTransferService,
        provisioning_service: IDataSourceProvisioningService,
    ) -> None:
        self._transfer_service = transfer_service
        self._provisioning_service = provisioning_service

    async def execute(self, context: PipelineContext) -> PipelineContext:
        """Default forward operation: transfer to the target stage's data source."""
        return await self.transfer_asset(context)

    async def transfer_asset(self, context: PipelineContext) -> PipelineContext:
        """Relocate the asset to context.target_stage's data source.

        Raises:
            PreconditionException: no target stage, or it has no data source.
            TransferFailedException: the relocation service reported failure.
        """
        target_stage = context.target_stage
        if target_stage is None:
            raise PreconditionException(
                "Target stage is required for asset transfer", asset_id=context.asset.id
            )
        if target_stage.target_data_source_id is None:
            raise PreconditionException(
                "Target data source is required for asset transfer",
                asset_id=context.asset.id,
                stage_id=target_stage.id,
            )
        await self._relocate(context, target_stage.target_data_source_id)
        return context

    async def transfer_asset_to_annotation(
        self, context: PipelineContext
    ) -> PipelineContext:
        """Relocate the asset to the project's canonical annotation data source.

        The destination comes from the provisioning service rather than
        context.current_stage: a veto can start from any downstream stage.
        """
        project_id = context.asset.project_id
        data_sources = await self._provisioning_service.ensure_required_data_sources_exist(
            project_id, include_review_stage=False
        )
        annotation_source = data_sources.annotation_data_source
        if annotation_source is None:
            raise PreconditionException(
                f"No annotation data source found for project {project_id}",
                project_id=project_id,
            )
        await self._relocate(context, annotation_source.id)
        return context

    async def _relocate(self, context: PipelineContext, data_source_id: str) -> None:
        asset = context.asset
        original_data_source_id = asset.data_source_id
        logger.info(
            "Transferring asset %s from data source %s to %s",
            asset.id,
            original_data_source_id,
            data_source_id,
        )
        transferred = await self._transfer_service.transfer_asset_to_data_source(
            asset.id, data_source_id
        )
        if not transferred:
            logger.error(
                "Relocation of asset %s to data source %s failed", asset.id, data_source_id
            )
            raise TransferFailedException(
                asset.id,
                data_source_id,
                f"could not move asset {asset.id} to data source {data_source_id}",
            )
        context.set_step_state(
            self.name,
            original_data_source_id=original_data_source_id,
            data_source_id=data_source_id,
        )
        asset.data_source_id = data_source_id

    async def rollback(self, context: PipelineContext) -> bool:
        """Move the asset back to the originating stage's data source.

        Falls back to the data source recorded before the transfer when the
        originating stage owns no storage.
        """
        asset = context.asset
        state = context.get_step_state(self.name)
        rollback_target = (
            context.current_stage.target_data_source_id
            or state.get("original_data_source_id")
        )
        if rollback_target is None:
            logger.warning("No rollback data source available for asset %s", asset.id)
            return False

        logger.info(
            "Rolling back asset %s transfer from %s to %s",
            asset.id,
            asset.data_source_id,
            rollback_target,
        )
        try:
            restored = await self._transfer_service.transfer_asset_to_data_source(
                asset.id, rollback_target
            )
        except Exception:
            logger.exception(
                "Failed to roll back asset %s to data source %s", asset.id, rollback_target
            )
            return False
        if not restored:
            logger.error(
                "Failed to roll back asset %s to data source %s", asset.id, rollback_target
            )
            return False
        asset.data_source_id = rollback_target
        return True
