"""Pipeline step that finds or creates the task for the asset's next unit of work."""

from __future__ import annotations

from collections import defaultdict
from typing import TYPE_CHECKING

from annoflow.domain.entities import TaskEntity
from annoflow.domain.enums import AlertType, TaskStatus, WorkflowStageType
from annoflow.domain.exceptions import (
    DataIntegrityException,
    PersistenceException,
    PreconditionException,
    ResourceNotFoundException,
)
from annoflow.shared.telemetry.logging import get_logger
from annoflow.shared.utils.datetime import utc_now

if TYPE_CHECKING:
    from annoflow.application.interfaces.repositories import ITaskRepository
    from annoflow.application.interfaces.services import (
        IManagementAlertService,
        IWorkflowStageResolver,
    )
    from annoflow.application.workflow.context import PipelineContext
    from annoflow.domain.entities import WorkflowStageEntity

logger = get_logger(__name__)

_READY_STATUS_BY_STAGE_TYPE: dict[WorkflowStageType, TaskStatus] = {
    WorkflowStageType.ANNOTATION: TaskStatus.READY_FOR_ANNOTATION,
    WorkflowStageType.REVISION: TaskStatus.READY_FOR_REVIEW,
    WorkflowStageType.COMPLETION: TaskStatus.READY_FOR_COMPLETION,
}

# Annotation task statuses a veto may send back for rework.
_REWORKABLE_STATUSES = frozenset({TaskStatus.COMPLETED, TaskStatus.VETOED})

_CREATED = "created"
_UPDATED = "updated"


def ready_status_for_stage_type(stage_type: WorkflowStageType) -> TaskStatus:
    """Return the "ready" status a re-opened task gets at a stage of this type."""
    return _READY_STATUS_BY_STAGE_TYPE.get(stage_type, TaskStatus.NOT_STARTED)


class TaskManagementStep:
    """Creates or re-opens the destination task; flags integrity violations on veto.

    Rollback deletes a task this step created. A status update of an
    existing task is left in place on rollback (see DESIGN.md).
    """

    name = "TaskManagementStep"

    def __init__(
        self,
        task_repo: ITaskRepository,
        stage_resolver: IWorkflowStageResolver,
        alert_service: IManagementAlertService,
    ) -> None:
        self._task_repo = task_repo
        self._stage_resolver = stage_resolver
        self._alert_service = alert_service

    async def execute(self, context: PipelineContext) -> PipelineContext:
        """Default forward operation: create or update the task at the target stage."""
        return await self.create_or_update_task_for_target_stage(context)

    async def create_or_update_task_for_target_stage(
        self, context: PipelineContext
    ) -> PipelineContext:
        """Ensure the asset has a task at context.target_stage.

        A missing task is created NOT_STARTED; an existing one moves to the
        stage type's ready status.

        Raises:
            PreconditionException: no target stage on the context.
            PersistenceException: store write failed.
        """
        target_stage = context.target_stage
        if target_stage is None:
            raise PreconditionException(
                "Target stage is required for task management", asset_id=context.asset.id
            )

        existing = await self._task_repo.find_by_asset_and_stage(
            context.asset.id, target_stage.id
        )
        if existing is None:
            context.next_task = await self._create_task(
                context, target_stage, TaskStatus.NOT_STARTED
            )
            return context

        ready_status = ready_status_for_stage_type(target_stage.stage_type)
        context.next_task = await self._update_task(context, existing, ready_status)
        return context

    async def update_annotation_task_for_changes(
        self, context: PipelineContext
    ) -> PipelineContext:
        """Send the asset's annotation task back for rework after a veto.

        - annotation task COMPLETED or VETOED: moved to CHANGES_REQUIRED;
        - no annotation task (asset imported past annotation): one is
          created with CHANGES_REQUIRED;
        - any other status: a DATA_INTEGRITY_VIOLATION alert is raised and
          the step fails.

        Raises:
            ResourceNotFoundException: workflow has no annotation stage.
            DataIntegrityException: annotation task in an unexpected status.
            PersistenceException: store write failed.
        """
        workflow_id = context.current_stage.workflow_id
        annotation_stage = await self._stage_resolver.get_first_annotation_stage(
            workflow_id
        )
        if annotation_stage is None:
            raise ResourceNotFoundException(
                "workflow_stage",
                workflow_id,
                message=f"First annotation stage not found for workflow {workflow_id}",
            )

        annotation_task = await self._task_repo.find_by_asset_and_stage(
            context.asset.id, annotation_stage.id
        )
        if annotation_task is None:
            logger.info(
                "No annotation task for asset %s; creating one with CHANGES_REQUIRED",
                context.asset.id,
            )
            context.next_task = await self._create_task(
                context, annotation_stage, TaskStatus.CHANGES_REQUIRED
            )
            return context

        if annotation_task.status not in _REWORKABLE_STATUSES:
            await self._report_integrity_violation(context, annotation_task)

        context.next_task = await self._update_task(
            context, annotation_task, TaskStatus.CHANGES_REQUIRED
        )
        return context

    async def validate_data_integrity(
        self, context: PipelineContext, candidate_task: TaskEntity | None = None
    ) -> bool:
        """Return False when the asset has conflicting active tasks.

        Conflicts are two active tasks at the same stage, or more than one
        IN_PROGRESS task overall. candidate_task (a task about to be written)
        is counted as well when it is not yet stored.
        """
        tasks = await self._task_repo.get_tasks_by_asset_id(context.asset.id)
        if candidate_task is not None and all(t.id != candidate_task.id for t in tasks):
            tasks = [*tasks, candidate_task]

        in_progress = [t for t in tasks if t.status == TaskStatus.IN_PROGRESS]
        if len(in_progress) > 1:
            logger.warning(
                "Data integrity violation: multiple IN_PROGRESS tasks for asset %s: %s",
                context.asset.id,
                ", ".join(str(t.id) for t in in_progress),
            )
            return False

        active_by_stage: dict[str, list[TaskEntity]] = defaultdict(list)
        for task in tasks:
            if task.status.is_active:
                active_by_stage[task.workflow_stage_id].append(task)
        for stage_id, active in active_by_stage.items():
            if len(active) > 1:
                logger.warning(
                    "Data integrity violation: %d active tasks for asset %s at stage %s",
                    len(active),
                    context.asset.id,
                    stage_id,
                )
                return False
        return True

    async def rollback(self, context: PipelineContext) -> bool:
        """Delete a task created by this step; leave updated tasks as they are."""
        state = context.get_step_state(self.name)
        operation = state.get("operation")
        if operation is None:
            logger.info("No task management changes to roll back for asset %s", context.asset.id)
            return True

        task_id = state["task_id"]
        if operation == _UPDATED:
            logger.warning(
                "Task %s status update is not rolled back (was %s) for asset %s",
                task_id,
                state.get("previous_status"),
                context.asset.id,
            )
            return True

        try:
            created = await self._task_repo.get_by_id(task_id)
            if created is None:
                logger.warning("Created task %s not found for rollback deletion", task_id)
                return False
            self._task_repo.remove(created)
            affected = await self._task_repo.save_changes()
        except Exception:
            logger.exception("Failed to delete created task %s during rollback", task_id)
            return False
        if affected <= 0:
            logger.error("Deleting created task %s affected no rows", task_id)
            return False

        if context.next_task is not None and context.next_task.id == task_id:
            context.next_task = None
        logger.info("Deleted created task %s during rollback", task_id)
        return True

    async def _create_task(
        self,
        context: PipelineContext,
        stage: WorkflowStageEntity,
        status: TaskStatus,
    ) -> TaskEntity:
        now = utc_now()
        task = TaskEntity(
            id=None,
            asset_id=context.asset.id,
            project_id=context.asset.project_id,
            workflow_id=stage.workflow_id,
            workflow_stage_id=stage.id,
            status=status,
            created_at=now,
            updated_at=now,
        )
        task = await self._task_repo.add(task)
        affected = await self._task_repo.save_changes()
        if affected <= 0:
            raise PersistenceException("add_task", f"no rows written for asset {context.asset.id}")
        context.set_step_state(self.name, operation=_CREATED, task_id=task.id)
        logger.info(
            "Created task %s (%s) for asset %s at stage %s",
            task.id,
            status.value,
            context.asset.id,
            stage.id,
        )
        return task

    async def _update_task(
        self,
        context: PipelineContext,
        task: TaskEntity,
        status: TaskStatus,
    ) -> TaskEntity:
        previous_status = task.status
        updated = await self._task_repo.update_status(task, status, context.user_id)
        context.set_step_state(
            self.name,
            operation=_UPDATED,
            task_id=updated.id,
            previous_status=previous_status,
        )
        logger.info(
            "Updated task %s from %s to %s for asset %s",
            updated.id,
            previous_status.value,
            status.value,
            context.asset.id,
        )
        return updated

    async def _report_integrity_violation(
        self, context: PipelineContext, annotation_task: TaskEntity
    ) -> None:
        """Raise the management alert, then fail with DataIntegrityException."""
        message = (
            "Invalid status: Annotation task must be COMPLETED or VETOED, "
            f"but found {annotation_task.status.value}"
        )
        logger.error(
            "Data integrity violation for asset %s: annotation task %s is %s",
            context.asset.id,
            annotation_task.id,
            annotation_task.status.value,
        )
        try:
            await self._alert_service.create_alert(
                AlertType.DATA_INTEGRITY_VIOLATION,
                context.task.id,
                context.asset.id,
                context.user_id,
                "Annotation task in unexpected status during veto",
                f"{message} (annotation task {annotation_task.id})",
            )
        except Exception:
            logger.critical(
                "Failed to raise data integrity alert for asset %s",
                context.asset.id,
                exc_info=True,
            )
        raise DataIntegrityException(
            message, task_id=annotation_task.id, asset_id=context.asset.id
        )
