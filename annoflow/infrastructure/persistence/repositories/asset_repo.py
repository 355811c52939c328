"""Asset repository (implements IAssetRepository)."""

from __future__ import annotations

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from annoflow.domain.entities import AssetEntity
from annoflow.domain.exceptions import PersistenceException
from annoflow.infrastructure.persistence.models.asset import Asset
from annoflow.infrastructure.persistence.repositories.base import BaseRepository
from annoflow.shared.utils.datetime import utc_now


def _to_entity(a: Asset) -> AssetEntity:
    """Map Asset ORM to AssetEntity."""
    return AssetEntity(
        id=a.id,
        project_id=a.project_id,
        data_source_id=a.data_source_id,
        filename=a.filename,
        status=a.status,
        created_at=a.created_at,
        updated_at=a.updated_at,
    )


class AssetRepository(BaseRepository[Asset]):
    """Asset repository. Implements IAssetRepository."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Asset)

    async def get_by_id(self, asset_id: str) -> AssetEntity | None:
        row = await self._get_model(asset_id)
        return _to_entity(row) if row else None

    async def update_data_source(self, asset_id: str, data_source_id: str) -> bool:
        """Repoint the asset; False when no asset row matched."""
        try:
            result = await self.db.execute(
                update(Asset)
                .where(Asset.id == asset_id)
                .values(data_source_id=data_source_id, updated_at=utc_now())
                .execution_options(synchronize_session="fetch")
            )
        except SQLAlchemyError as e:
            raise PersistenceException("update_data_source", str(e)) from e
        return (result.rowcount or 0) > 0
