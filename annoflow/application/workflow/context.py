"""Pipeline context: the per-run carrier threaded through workflow steps."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any

from annoflow.domain.entities import AssetEntity, TaskEntity, WorkflowStageEntity
from annoflow.shared.utils.datetime import utc_now


@dataclass
class PipelineContext:
    """State of one pipeline run over a task/asset pair.

    Built fresh for every invocation and never persisted. Steps replace
    `task`, update `asset` and set `next_task` in place so later steps and
    rollback see the latest state. Rollback bookkeeping lives in
    `step_state` (keyed by step name), so step instances hold no per-run
    state and may be shared between concurrent requests.
    """

    task: TaskEntity
    asset: AssetEntity
    current_stage: WorkflowStageEntity
    user_id: str
    reason: str | None = None
    target_stage: WorkflowStageEntity | None = None
    next_task: TaskEntity | None = None
    created_at: datetime = field(default_factory=utc_now)
    step_state: dict[str, dict[str, Any]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.task is None:
            raise ValueError("task is required")
        if self.asset is None:
            raise ValueError("asset is required")
        if self.current_stage is None:
            raise ValueError("current_stage is required")
        if not self.user_id:
            raise ValueError("user_id is required")

    def with_target_stage(self, target_stage: WorkflowStageEntity) -> PipelineContext:
        """Return a copy of this context carrying the resolved destination stage."""
        if target_stage is None:
            raise ValueError("target_stage is required")
        return replace(
            self,
            target_stage=target_stage,
            step_state={name: dict(data) for name, data in self.step_state.items()},
        )

    def set_step_state(self, step_name: str, **data: Any) -> None:
        """Merge rollback data for a step."""
        self.step_state.setdefault(step_name, {}).update(data)

    def get_step_state(self, step_name: str) -> dict[str, Any]:
        """Return rollback data recorded by a step (empty when none)."""
        return self.step_state.get(step_name, {})
