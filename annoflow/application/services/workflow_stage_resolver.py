"""Workflow graph lookups (implements IWorkflowStageResolver)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from annoflow.domain.enums import WorkflowStageType
from annoflow.shared.telemetry.logging import get_logger

if TYPE_CHECKING:
    from annoflow.application.interfaces.repositories import (
        IWorkflowStageConnectionRepository,
        IWorkflowStageRepository,
    )
    from annoflow.domain.entities import (
        WorkflowStageConnectionEntity,
        WorkflowStageEntity,
    )

logger = get_logger(__name__)


class WorkflowStageResolver:
    """Resolves stage successors and well-known stages from stored connections."""

    def __init__(
        self,
        stage_repo: IWorkflowStageRepository,
        connection_repo: IWorkflowStageConnectionRepository,
    ) -> None:
        self._stage_repo = stage_repo
        self._connection_repo = connection_repo

    async def get_next_stage(
        self, current_stage_id: str, condition: str | None = None
    ) -> WorkflowStageEntity | None:
        """Return the stage reached from current_stage_id.

        Edge choice: the connection whose condition equals `condition`, else
        the default (unconditional) connection, else the first connection.
        None when the stage has no outgoing connection.
        """
        connections = await self._connection_repo.get_outgoing(current_stage_id)
        if not connections:
            return None
        edge = _choose_edge(connections, condition)
        stage = await self._stage_repo.get_by_id(edge.to_stage_id)
        if stage is None:
            logger.warning(
                "Connection %s from stage %s points at missing stage %s",
                edge.id,
                current_stage_id,
                edge.to_stage_id,
            )
        return stage

    async def get_first_annotation_stage(
        self, workflow_id: str
    ) -> WorkflowStageEntity | None:
        """Return the lowest-ordered ANNOTATION stage of the workflow, or None."""
        stages = await self._stage_repo.get_by_workflow(workflow_id)
        annotation = [s for s in stages if s.stage_type == WorkflowStageType.ANNOTATION]
        if not annotation:
            return None
        return min(annotation, key=lambda s: s.stage_order)

    async def get_completion_predecessors(
        self, workflow_id: str
    ) -> list[WorkflowStageEntity]:
        """Return stages with a connection into one of the workflow's COMPLETION stages."""
        stages = await self._stage_repo.get_by_workflow(workflow_id)
        by_id = {s.id: s for s in stages}
        predecessors: dict[str, WorkflowStageEntity] = {}
        for stage in stages:
            if stage.stage_type != WorkflowStageType.COMPLETION:
                continue
            for connection in await self._connection_repo.get_incoming(stage.id):
                source = by_id.get(connection.from_stage_id)
                if source is not None:
                    predecessors[source.id] = source
        return sorted(predecessors.values(), key=lambda s: s.stage_order)

    async def connection_exists(self, from_stage_id: str, to_stage_id: str) -> bool:
        connections = await self._connection_repo.get_outgoing(from_stage_id)
        return any(c.to_stage_id == to_stage_id for c in connections)


def _choose_edge(
    connections: list[WorkflowStageConnectionEntity], condition: str | None
) -> WorkflowStageConnectionEntity:
    if condition is not None:
        for connection in connections:
            if connection.condition == condition:
                return connection
    for connection in connections:
        if connection.is_default:
            return connection
    return connections[0]
