"""Workflow stage and connection repositories (implement the workflow graph ports)."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from annoflow.domain.entities import WorkflowStageConnectionEntity, WorkflowStageEntity
from annoflow.domain.enums import WorkflowStageType
from annoflow.infrastructure.persistence.models.workflow_stage import (
    WorkflowStage,
    WorkflowStageConnection,
)
from annoflow.infrastructure.persistence.repositories.base import BaseRepository


def _to_stage(s: WorkflowStage) -> WorkflowStageEntity:
    """Map WorkflowStage ORM to WorkflowStageEntity."""
    return WorkflowStageEntity(
        id=s.id,
        workflow_id=s.workflow_id,
        name=s.name,
        stage_type=WorkflowStageType(s.stage_type),
        stage_order=s.stage_order,
        is_initial=s.is_initial,
        is_final=s.is_final,
        target_data_source_id=s.target_data_source_id,
    )


def _to_connection(c: WorkflowStageConnection) -> WorkflowStageConnectionEntity:
    return WorkflowStageConnectionEntity(
        id=c.id,
        from_stage_id=c.from_stage_id,
        to_stage_id=c.to_stage_id,
        condition=c.condition,
    )


class WorkflowStageRepository(BaseRepository[WorkflowStage]):
    """Workflow stage repository. Implements IWorkflowStageRepository."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, WorkflowStage)

    async def get_by_id(self, stage_id: str) -> WorkflowStageEntity | None:
        row = await self._get_model(stage_id)
        return _to_stage(row) if row else None

    async def get_by_workflow(self, workflow_id: str) -> list[WorkflowStageEntity]:
        result = await self.db.execute(
            select(WorkflowStage)
            .where(WorkflowStage.workflow_id == workflow_id)
            .order_by(WorkflowStage.stage_order, WorkflowStage.created_at)
        )
        return [_to_stage(s) for s in result.scalars().all()]


class WorkflowStageConnectionRepository(BaseRepository[WorkflowStageConnection]):
    """Stage connection repository. Implements IWorkflowStageConnectionRepository."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, WorkflowStageConnection)

    async def get_outgoing(self, stage_id: str) -> list[WorkflowStageConnectionEntity]:
        result = await self.db.execute(
            select(WorkflowStageConnection)
            .where(WorkflowStageConnection.from_stage_id == stage_id)
            .order_by(WorkflowStageConnection.created_at, WorkflowStageConnection.id)
        )
        return [_to_connection(c) for c in result.scalars().all()]

    async def get_incoming(self, stage_id: str) -> list[WorkflowStageConnectionEntity]:
        result = await self.db.execute(
            select(WorkflowStageConnection)
            .where(WorkflowStageConnection.to_stage_id == stage_id)
            .order_by(WorkflowStageConnection.created_at, WorkflowStageConnection.id)
        )
        return [_to_connection(c) for c in result.scalars().all()]
