"""Persistence models: ORM entities and mixins."""

from annoflow.infrastructure.persistence.models.asset import Asset
from annoflow.infrastructure.persistence.models.data_source import DataSource
from annoflow.infrastructure.persistence.models.management_alert import ManagementAlert
from annoflow.infrastructure.persistence.models.mixins import (
    CuidMixin,
    ProjectMixin,
    ProjectScopedModel,
    TimestampMixin,
)
from annoflow.infrastructure.persistence.models.task import Task
from annoflow.infrastructure.persistence.models.workflow_stage import (
    WorkflowStage,
    WorkflowStageConnection,
)

__all__ = [
    "Asset",
    "CuidMixin",
    "DataSource",
    "ManagementAlert",
    "ProjectMixin",
    "ProjectScopedModel",
    "Task",
    "TimestampMixin",
    "WorkflowStage",
    "WorkflowStageConnection",
]
