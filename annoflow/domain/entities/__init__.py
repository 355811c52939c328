"""Domain entities.

Pure domain models; no ORM or persistence concerns.
"""

from annoflow.domain.entities.asset import AssetEntity
from annoflow.domain.entities.data_source import DataSourceEntity
from annoflow.domain.entities.task import TaskEntity
from annoflow.domain.entities.workflow_stage import (
    WorkflowStageConnectionEntity,
    WorkflowStageEntity,
)

__all__ = [
    "AssetEntity",
    "DataSourceEntity",
    "TaskEntity",
    "WorkflowStageConnectionEntity",
    "WorkflowStageEntity",
]
