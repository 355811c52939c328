"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference domain entities or application DTOs only; no infrastructure imports.
Write methods raise PersistenceException when the underlying store fails.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from annoflow.application.dtos.alert import ManagementAlert
    from annoflow.domain.entities import (
        AssetEntity,
        DataSourceEntity,
        TaskEntity,
        WorkflowStageConnectionEntity,
        WorkflowStageEntity,
    )
    from annoflow.domain.enums import DataSourceType, TaskStatus


# Task repository interface
class ITaskRepository(Protocol):
    """Protocol for task store (DIP)."""

    async def get_by_id(self, task_id: str) -> TaskEntity | None:
        """Return task by ID."""

    async def find_by_asset_and_stage(
        self, asset_id: str, stage_id: str
    ) -> TaskEntity | None:
        """Return the most recent task for asset at stage, or None."""

    async def get_tasks_by_asset_id(self, asset_id: str) -> list[TaskEntity]:
        """Return all tasks (active and historical) for an asset."""

    async def add(self, task: TaskEntity) -> TaskEntity:
        """Stage a new task for insertion; returns it with its id assigned."""

    def remove(self, task: TaskEntity) -> None:
        """Stage a task for deletion."""

    async def update_status(
        self,
        task: TaskEntity,
        new_status: TaskStatus,
        user_id: str,
        *,
        assign_to: str | None = None,
    ) -> TaskEntity:
        """Apply and persist a status change; return the updated task.

        assign_to, when given, is written as the task's assignee in the same update.
        """

    async def save_changes(self) -> int:
        """Flush staged adds/removes; return the number of affected rows."""


# Asset repository interface
class IAssetRepository(Protocol):
    """Protocol for asset store (DIP)."""

    async def get_by_id(self, asset_id: str) -> AssetEntity | None:
        """Return asset by ID."""

    async def update_data_source(self, asset_id: str, data_source_id: str) -> bool:
        """Point the asset at a new data source; False when the asset is missing."""


# Workflow stage repository interface
class IWorkflowStageRepository(Protocol):
    """Protocol for workflow stage store (DIP)."""

    async def get_by_id(self, stage_id: str) -> WorkflowStageEntity | None:
        """Return stage by ID."""

    async def get_by_workflow(self, workflow_id: str) -> list[WorkflowStageEntity]:
        """Return all stages of a workflow ordered by stage_order."""


# Workflow stage connection repository interface
class IWorkflowStageConnectionRepository(Protocol):
    """Protocol for workflow stage connection store (DIP)."""

    async def get_outgoing(self, stage_id: str) -> list[WorkflowStageConnectionEntity]:
        """Return edges leaving the stage."""

    async def get_incoming(self, stage_id: str) -> list[WorkflowStageConnectionEntity]:
        """Return edges entering the stage."""


# Data source repository interface
class IDataSourceRepository(Protocol):
    """Protocol for project data source store (DIP)."""

    async def get_by_id(self, data_source_id: str) -> DataSourceEntity | None:
        """Return data source by ID."""

    async def get_by_project(self, project_id: str) -> list[DataSourceEntity]:
        """Return all data sources of a project (oldest first)."""

    async def create(
        self,
        project_id: str,
        name: str,
        source_type: DataSourceType,
        *,
        description: str | None = None,
        is_default: bool = False,
    ) -> DataSourceEntity:
        """Create a data source and return it."""


# Management alert repository interface
class IManagementAlertRepository(Protocol):
    """Protocol for management alert store (DIP)."""

    async def add(self, alert: ManagementAlert) -> ManagementAlert:
        """Persist a new alert."""

    async def get_by_id(self, alert_id: str) -> ManagementAlert | None:
        """Return alert by ID."""

    async def mark_resolved(
        self, alert_id: str, resolved_by_user_id: str, resolution_notes: str
    ) -> bool:
        """Mark alert resolved; False when not found."""
