"""Data source repository (implements IDataSourceRepository)."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from annoflow.domain.entities import DataSourceEntity
from annoflow.domain.enums import DataSourceType
from annoflow.infrastructure.persistence.models.data_source import DataSource
from annoflow.infrastructure.persistence.repositories.base import BaseRepository
from annoflow.shared.utils.generators import generate_cuid


def _to_entity(d: DataSource) -> DataSourceEntity:
    """Map DataSource ORM to DataSourceEntity."""
    return DataSourceEntity(
        id=d.id,
        project_id=d.project_id,
        name=d.name,
        source_type=DataSourceType(d.source_type),
        storage_prefix=d.storage_prefix,
        is_default=d.is_default,
        description=d.description,
    )


class DataSourceRepository(BaseRepository[DataSource]):
    """Data source repository. Implements IDataSourceRepository."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, DataSource)

    async def get_by_id(self, data_source_id: str) -> DataSourceEntity | None:
        row = await self._get_model(data_source_id)
        return _to_entity(row) if row else None

    async def get_by_project(self, project_id: str) -> list[DataSourceEntity]:
        result = await self.db.execute(
            select(DataSource)
            .where(DataSource.project_id == project_id)
            .order_by(DataSource.created_at, DataSource.id)
        )
        return [_to_entity(d) for d in result.scalars().all()]

    async def create(
        self,
        project_id: str,
        name: str,
        source_type: DataSourceType,
        *,
        description: str | None = None,
        is_default: bool = False,
    ) -> DataSourceEntity:
        """Create a data source stored under projects/<project_id>/<id>."""
        source_id = generate_cuid()
        row = DataSource(
            id=source_id,
            project_id=project_id,
            name=name,
            source_type=source_type.value,
            storage_prefix=f"projects/{project_id}/{source_id}",
            is_default=is_default,
            description=description,
        )
        self.db.add(row)
        await self._flush("create_data_source")
        await self.db.refresh(row)
        return _to_entity(row)
