"""Rollback-capable pipeline steps."""

from annoflow.application.workflow.steps.asset_transfer import AssetTransferStep
from annoflow.application.workflow.steps.base import PipelineStep
from annoflow.application.workflow.steps.task_management import (
    TaskManagementStep,
    ready_status_for_stage_type,
)
from annoflow.application.workflow.steps.task_status_update import TaskStatusUpdateStep

__all__ = [
    "AssetTransferStep",
    "PipelineStep",
    "TaskManagementStep",
    "TaskStatusUpdateStep",
    "ready_status_for_stage_type",
]
