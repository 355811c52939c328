"""Task status operations: route a requested status change to the right workflow."""

from __future__ import annotations

from typing import TYPE_CHECKING

from annoflow.application.workflow.result import PipelineResult
from annoflow.domain.enums import TaskStatus
from annoflow.domain.exceptions import (
    AnnoflowException,
    AuthorizationException,
    ResourceNotFoundException,
)
from annoflow.shared.telemetry.logging import get_logger
from annoflow.shared.telemetry.tracing import add_span_attributes, traced

if TYPE_CHECKING:
    import asyncio

    from annoflow.application.interfaces.repositories import ITaskRepository
    from annoflow.application.interfaces.services import ITaskStatusValidator
    from annoflow.application.workflow import TaskCompletionPipeline, TaskVetoPipeline
    from annoflow.domain.entities import TaskEntity

logger = get_logger(__name__)


class TaskStatusService:
    """Entry point for user-requested task status changes.

    COMPLETED runs the completion pipeline and VETOED the veto pipeline;
    every other target (start, suspend, defer, archive, ...) is a single
    validated status write on the task.
    """

    def __init__(
        self,
        task_repo: ITaskRepository,
        validator: ITaskStatusValidator,
        completion_pipeline: TaskCompletionPipeline,
        veto_pipeline: TaskVetoPipeline,
    ) -> None:
        self.task_repo = task_repo
        self.validator = validator
        self.completion_pipeline = completion_pipeline
        self.veto_pipeline = veto_pipeline

    @traced("task_status.change_status")
    async def change_status(
        self,
        task_id: str,
        target_status: TaskStatus,
        user_id: str,
        reason: str | None = None,
        *,
        cancel_event: asyncio.Event | None = None,
    ) -> PipelineResult:
        """Apply target_status to task_id on behalf of user_id."""
        add_span_attributes(task_id=task_id, target_status=target_status.value)
        if target_status == TaskStatus.COMPLETED:
            return await self.completion_pipeline.execute(
                task_id, user_id, cancel_event=cancel_event
            )
        if target_status == TaskStatus.VETOED:
            return await self.veto_pipeline.execute(
                task_id, user_id, reason, cancel_event=cancel_event
            )

        try:
            updated = await self._apply_direct_transition(task_id, target_status, user_id)
        except AnnoflowException as e:
            logger.warning(
                "Status change of task %s to %s rejected: %s",
                task_id,
                target_status.value,
                e.message,
            )
            return PipelineResult.failure(e.message, error_code=e.error_code)
        return PipelineResult.success(updated)

    async def _apply_direct_transition(
        self, task_id: str, target_status: TaskStatus, user_id: str
    ) -> TaskEntity:
        task = await self.task_repo.get_by_id(task_id)
        if task is None:
            raise ResourceNotFoundException(
                "task", task_id, message=f"Task not found with ID: {task_id}"
            )
        # Unassigned tasks may be picked up by anyone.
        if task.assigned_to_user_id is not None and not task.is_assigned_to(user_id):
            raise AuthorizationException(resource="task", action=target_status.value.lower())
        self.validator.validate_transition(task, target_status)

        # Starting an unassigned task assigns it to the user who starts it.
        assign_to = (
            user_id
            if task.assigned_to_user_id is None and target_status == TaskStatus.IN_PROGRESS
            else None
        )
        previous = task.status
        updated = await self.task_repo.update_status(
            task, target_status, user_id, assign_to=assign_to
        )
        logger.info(
            "Task %s moved from %s to %s by user %s%s",
            task_id,
            previous.value,
            target_status.value,
            user_id,
            " (assigned)" if assign_to else "",
        )
        return updated
