"""Workflow stage and connection entities.

A stage is a node in a project's workflow graph; connections are directed
edges with an optional branch condition (None marks the default edge).
"""

from dataclasses import dataclass

from annoflow.domain.enums import WorkflowStageType


@dataclass
class WorkflowStageEntity:
    """Domain entity for a workflow stage."""

    id: str
    workflow_id: str
    name: str
    stage_type: WorkflowStageType
    stage_order: int = 0
    is_initial: bool = False
    is_final: bool = False
    target_data_source_id: str | None = None

    def owns_storage(self) -> bool:
        """Return whether the stage is bound to a data source."""
        return self.target_data_source_id is not None


@dataclass
class WorkflowStageConnectionEntity:
    """Directed edge between two workflow stages."""

    id: str
    from_stage_id: str
    to_stage_id: str
    condition: str | None = None

    @property
    def is_default(self) -> bool:
        """Return whether this is the unconditional edge."""
        return self.condition is None
