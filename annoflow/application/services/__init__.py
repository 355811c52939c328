"""Application services: stage resolution, status rules, asset relocation, provisioning, alerts."""

from annoflow.application.services.asset_transfer_service import AssetTransferService
from annoflow.application.services.data_source_service import (
    DataSourceProvisioningService,
)
from annoflow.application.services.management_alert_service import (
    ManagementAlertService,
)
from annoflow.application.services.task_status_validator import TaskStatusValidator
from annoflow.application.services.workflow_stage_resolver import WorkflowStageResolver

__all__ = [
    "AssetTransferService",
    "DataSourceProvisioningService",
    "ManagementAlertService",
    "TaskStatusValidator",
    "WorkflowStageResolver",
]
