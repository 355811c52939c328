"""Application interfaces (ports): repository and service protocols."""

from annoflow.application.interfaces.repositories import (
    IAssetRepository,
    IDataSourceRepository,
    IManagementAlertRepository,
    ITaskRepository,
    IWorkflowStageConnectionRepository,
    IWorkflowStageRepository,
)
from annoflow.application.interfaces.services import (
    IAssetTransferService,
    IDataSourceProvisioningService,
    IManagementAlertService,
    INotificationService,
    IStorageService,
    ITaskStatusValidator,
    IWorkflowStageResolver,
)

__all__ = [
    "IAssetRepository",
    "IAssetTransferService",
    "IDataSourceProvisioningService",
    "IDataSourceRepository",
    "IManagementAlertRepository",
    "IManagementAlertService",
    "INotificationService",
    "IStorageService",
    "ITaskRepository",
    "ITaskStatusValidator",
    "IWorkflowStageConnectionRepository",
    "IWorkflowStageRepository",
    "IWorkflowStageResolver",
]
