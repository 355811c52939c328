"""Persistence repositories. Re-exports for dependency injection."""

from annoflow.infrastructure.persistence.repositories.alert_repo import (
    ManagementAlertRepository,
)
from annoflow.infrastructure.persistence.repositories.asset_repo import AssetRepository
from annoflow.infrastructure.persistence.repositories.base import BaseRepository
from annoflow.infrastructure.persistence.repositories.data_source_repo import (
    DataSourceRepository,
)
from annoflow.infrastructure.persistence.repositories.task_repo import TaskRepository
from annoflow.infrastructure.persistence.repositories.workflow_stage_repo import (
    WorkflowStageConnectionRepository,
    WorkflowStageRepository,
)

__all__ = [
    "AssetRepository",
    "BaseRepository",
    "DataSourceRepository",
    "ManagementAlertRepository",
    "TaskRepository",
    "WorkflowStageConnectionRepository",
    "WorkflowStageRepository",
]
