"""Forward pipeline: IN_PROGRESS -> COMPLETED -> asset transfer -> next-stage task."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from annoflow.application.workflow.context import PipelineContext
from annoflow.application.workflow.result import PipelineResult
from annoflow.application.workflow.runner import StepRunner, rollback_and_report
from annoflow.domain.enums import TaskStatus
from annoflow.domain.exceptions import (
    AnnoflowException,
    AuthorizationException,
    InvalidStateException,
    ResourceNotFoundException,
)
from annoflow.shared.telemetry.logging import get_logger
from annoflow.shared.telemetry.tracing import add_span_attributes, traced

if TYPE_CHECKING:
    from annoflow.application.interfaces.repositories import (
        IAssetRepository,
        ITaskRepository,
        IWorkflowStageRepository,
    )
    from annoflow.application.interfaces.services import (
        IManagementAlertService,
        IWorkflowStageResolver,
    )
    from annoflow.application.workflow.steps import (
        AssetTransferStep,
        TaskManagementStep,
        TaskStatusUpdateStep,
    )

logger = get_logger(__name__)


class TaskCompletionPipeline:
    """Completes a task and advances its asset to the next workflow stage.

    Runs TaskStatusUpdateStep (-> COMPLETED), then, when the stage has a
    successor, AssetTransferStep and TaskManagementStep. On a step failure
    the executed steps are rolled back in reverse order and a failed
    PipelineResult carries the originating error.
    """

    name = "TaskCompletionPipeline"

    def __init__(
        self,
        task_repo: ITaskRepository,
        asset_repo: IAssetRepository,
        stage_repo: IWorkflowStageRepository,
        stage_resolver: IWorkflowStageResolver,
        status_step: TaskStatusUpdateStep,
        transfer_step: AssetTransferStep,
        management_step: TaskManagementStep,
        alert_service: IManagementAlertService,
        *,
        alert_on_rollback_failure: bool = True,
    ) -> None:
        self._task_repo = task_repo
        self._asset_repo = asset_repo
        self._stage_repo = stage_repo
        self._stage_resolver = stage_resolver
        self._status_step = status_step
        self._transfer_step = transfer_step
        self._management_step = management_step
        self._alert_service = alert_service
        self._alert_on_rollback_failure = alert_on_rollback_failure

    @traced("task_completion_pipeline.execute")
    async def execute(
        self,
        task_id: str,
        user_id: str,
        *,
        cancel_event: asyncio.Event | None = None,
    ) -> PipelineResult:
        """Complete task_id on behalf of user_id.

        Expected business failures are returned as failed results; any other
        exception is re-raised after rollback has been attempted.
        """
        add_span_attributes(task_id=task_id, user_id=user_id)
        logger.info("Starting task completion pipeline for task %s by user %s", task_id, user_id)

        try:
            context = await self._load_context(task_id, user_id)
            next_stage = await self._stage_resolver.get_next_stage(context.current_stage.id)
        except AnnoflowException as e:
            logger.warning("Task %s cannot be completed: %s", task_id, e.message)
            return PipelineResult.failure(e.message, error_code=e.error_code)

        if next_stage is not None:
            context = context.with_target_stage(next_stage)
        else:
            logger.info(
                "Stage %s has no successor; task %s completes without advancing",
                context.current_stage.id,
                task_id,
            )

        runner = StepRunner(self.name, context, cancel_event)
        try:
            await runner.run(self._status_step, self._mark_completed)
            if next_stage is not None:
                await runner.run(self._transfer_step, self._transfer_step.transfer_asset)
                await runner.run(
                    self._management_step,
                    self._management_step.create_or_update_task_for_target_stage,
                )
        except AnnoflowException as e:
            logger.error(
                "Task completion pipeline failed for task %s: %s",
                task_id,
                e.message,
                exc_info=True,
            )
            rollback_errors = await rollback_and_report(
                runner,
                self._alert_service,
                e.message,
                alert_on_failure=self._alert_on_rollback_failure,
            )
            return PipelineResult.failure(
                e.message, error_code=e.error_code, rollback_errors=rollback_errors
            )
        except Exception as e:
            logger.error(
                "Unexpected error in task completion pipeline for task %s",
                task_id,
                exc_info=True,
            )
            await rollback_and_report(
                runner,
                self._alert_service,
                str(e),
                alert_on_failure=self._alert_on_rollback_failure,
            )
            raise

        context = runner.context
        logger.info(
            "Task completion pipeline succeeded for task %s (next task: %s)",
            task_id,
            context.next_task.id if context.next_task else None,
        )
        return PipelineResult.success(context.task, context.next_task)

    async def can_execute(self, task_id: str, user_id: str) -> bool:
        """Return True when the task exists and is assigned to user_id."""
        task = await self._task_repo.get_by_id(task_id)
        return task is not None and task.is_assigned_to(user_id)

    async def _mark_completed(self, context: PipelineContext) -> PipelineContext:
        return await self._status_step.update_status(context, TaskStatus.COMPLETED)

    async def _load_context(self, task_id: str, user_id: str) -> PipelineContext:
        task = await self._task_repo.get_by_id(task_id)
        if task is None:
            raise ResourceNotFoundException(
                "task", task_id, message=f"Task not found with ID: {task_id}"
            )
        if task.status != TaskStatus.IN_PROGRESS:
            raise InvalidStateException(
                f"Task {task_id} cannot be completed: current status is {task.status.value}",
                current_status=task.status.value,
                target_status=TaskStatus.COMPLETED.value,
            )
        if not task.is_assigned_to(user_id):
            raise AuthorizationException(resource="task", action="complete")

        current_stage = await self._stage_repo.get_by_id(task.workflow_stage_id)
        if current_stage is None:
            raise ResourceNotFoundException("workflow_stage", task.workflow_stage_id)
        asset = await self._asset_repo.get_by_id(task.asset_id)
        if asset is None:
            raise ResourceNotFoundException("asset", task.asset_id)
        return PipelineContext(
            task=task, asset=asset, current_stage=current_stage, user_id=user_id
        )
