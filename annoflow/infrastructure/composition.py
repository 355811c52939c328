"""Composition root: wires workflow pipelines onto one AsyncSession.

Build a fresh set per request (one session per pipeline run); steps hold no
per-run state, but the repositories stage writes on their session.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from annoflow.application.services import (
    AssetTransferService,
    DataSourceProvisioningService,
    ManagementAlertService,
    TaskStatusValidator,
    WorkflowStageResolver,
)
from annoflow.application.use_cases.tasks import TaskStatusService
from annoflow.application.workflow import TaskCompletionPipeline, TaskVetoPipeline
from annoflow.application.workflow.steps import (
    AssetTransferStep,
    TaskManagementStep,
    TaskStatusUpdateStep,
)
from annoflow.core.config import get_settings
from annoflow.infrastructure.external.storage import StorageFactory
from annoflow.infrastructure.persistence.repositories import (
    AssetRepository,
    DataSourceRepository,
    ManagementAlertRepository,
    TaskRepository,
    WorkflowStageConnectionRepository,
    WorkflowStageRepository,
)
from annoflow.infrastructure.services import LogOnlyNotificationService

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from annoflow.application.interfaces.services import IStorageService
    from annoflow.core.config import Settings


@dataclass
class WorkflowComponents:
    """Pipelines and their shared collaborators for one session."""

    completion_pipeline: TaskCompletionPipeline
    veto_pipeline: TaskVetoPipeline
    task_status_service: TaskStatusService
    alert_service: ManagementAlertService


def build_workflow(
    db: AsyncSession,
    settings: Settings | None = None,
    storage: IStorageService | None = None,
) -> WorkflowComponents:
    """Wire repositories, services, steps and pipelines for db."""
    s = settings or get_settings()
    storage = storage or StorageFactory.create_storage_service(s)

    task_repo = TaskRepository(db)
    asset_repo = AssetRepository(db)
    stage_repo = WorkflowStageRepository(db)
    data_source_repo = DataSourceRepository(db)

    resolver = WorkflowStageResolver(stage_repo, WorkflowStageConnectionRepository(db))
    alert_service = ManagementAlertService(
        ManagementAlertRepository(db),
        notification_service=LogOnlyNotificationService(),
        recipients=s.alert_recipient_list,
    )
    validator = TaskStatusValidator()
    provisioning = DataSourceProvisioningService(
        data_source_repo,
        annotation_source_name=s.default_annotation_data_source_name,
        review_source_name=s.default_review_data_source_name,
    )

    status_step = TaskStatusUpdateStep(task_repo, validator)
    transfer_step = AssetTransferStep(
        AssetTransferService(asset_repo, data_source_repo, storage), provisioning
    )
    management_step = TaskManagementStep(task_repo, resolver, alert_service)

    completion = TaskCompletionPipeline(
        task_repo,
        asset_repo,
        stage_repo,
        resolver,
        status_step,
        transfer_step,
        management_step,
        alert_service,
        alert_on_rollback_failure=s.pipeline_alert_on_rollback_failure,
    )
    veto = TaskVetoPipeline(
        task_repo,
        asset_repo,
        stage_repo,
        status_step,
        transfer_step,
        management_step,
        alert_service,
        alert_on_rollback_failure=s.pipeline_alert_on_rollback_failure,
    )
    return WorkflowComponents(
        completion_pipeline=completion,
        veto_pipeline=veto,
        task_status_service=TaskStatusService(task_repo, validator, completion, veto),
        alert_service=alert_service,
    )
