"""Pipeline step that writes the task's new status and can restore the previous one."""

from __future__ import annotations

from typing import TYPE_CHECKING

from annoflow.domain.enums import TaskStatus
from annoflow.shared.telemetry.logging import get_logger

if TYPE_CHECKING:
    from annoflow.application.interfaces.repositories import ITaskRepository
    from annoflow.application.interfaces.services import ITaskStatusValidator
    from annoflow.application.workflow.context import PipelineContext

logger = get_logger(__name__)


class TaskStatusUpdateStep:
    """Updates context.task status; remembers the previous status per task id for rollback."""

    name = "TaskStatusUpdateStep"

    def __init__(
        self,
        task_repo: ITaskRepository,
        validator: ITaskStatusValidator | None = None,
    ) -> None:
        self._task_repo = task_repo
        self._validator = validator

    async def execute(self, context: PipelineContext) -> PipelineContext:
        """Default forward operation: mark the task COMPLETED."""
        return await self.update_status(context, TaskStatus.COMPLETED)

    async def update_status(
        self, context: PipelineContext, target_status: TaskStatus
    ) -> PipelineContext:
        """Persist target_status for context.task.

        Raises:
            InvalidStateException: validator rejects the transition.
            PersistenceException: store write failed.
        """
        task = context.task
        if self._validator is not None:
            self._validator.validate_transition(task, target_status)

        previous_status = task.status
        logger.info(
            "Updating task %s status from %s to %s",
            task.id,
            previous_status.value,
            target_status.value,
        )
        try:
            updated = await self._task_repo.update_status(
                task, target_status, context.user_id
            )
        except Exception:
            logger.exception(
                "Failed to update task %s status to %s", task.id, target_status.value
            )
            raise

        context.set_step_state(self.name, **{str(task.id): previous_status})
        context.task = updated
        return context

    async def rollback(self, context: PipelineContext) -> bool:
        """Write back the status recorded before update_status ran."""
        task = context.task
        previous_status = context.get_step_state(self.name).get(str(task.id))
        if previous_status is None:
            logger.warning("No previous status recorded for rollback of task %s", task.id)
            return False

        logger.info(
            "Rolling back task %s status from %s to %s",
            task.id,
            task.status.value,
            previous_status.value,
        )
        try:
            context.task = await self._task_repo.update_status(
                task, previous_status, context.user_id
            )
        except Exception:
            logger.exception(
                "Failed to roll back task %s status to %s", task.id, previous_status.value
            )
            return False
        return True
