"""Task repository (implements ITaskRepository)."""

from __future__ import annotations

from dataclasses import replace

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from annoflow.domain.entities import TaskEntity
from annoflow.domain.enums import TaskStatus
from annoflow.domain.exceptions import PersistenceException, ResourceNotFoundException
from annoflow.infrastructure.persistence.models.task import Task
from annoflow.infrastructure.persistence.repositories.base import BaseRepository
from annoflow.shared.utils.datetime import utc_now
from annoflow.shared.utils.generators import generate_cuid

_STATUS_COLUMNS = (
    "status",
    "last_worked_on_by_user_id",
    "completed_at",
    "archived_at",
    "suspended_at",
    "deferred_at",
    "vetoed_at",
    "changes_required_at",
    "updated_at",
)


def _to_entity(t: Task) -> TaskEntity:
    """Map Task ORM to TaskEntity."""
    return TaskEntity(
        id=t.id,
        asset_id=t.asset_id,
        project_id=t.project_id,
        workflow_id=t.workflow_id,
        workflow_stage_id=t.workflow_stage_id,
        status=TaskStatus(t.status),
        assigned_to_user_id=t.assigned_to_user_id,
        last_worked_on_by_user_id=t.last_worked_on_by_user_id,
        priority=t.priority,
        due_date=t.due_date,
        completed_at=t.completed_at,
        archived_at=t.archived_at,
        suspended_at=t.suspended_at,
        deferred_at=t.deferred_at,
        vetoed_at=t.vetoed_at,
        changes_required_at=t.changes_required_at,
        created_at=t.created_at,
        updated_at=t.updated_at,
    )


class TaskRepository(BaseRepository[Task]):
    """Task repository. Implements ITaskRepository.

    add/remove are staged and written by save_changes, which reports the
    number of rows inserted or deleted.
    """

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Task)
        self._pending_adds = 0
        self._pending_removals: list[str] = []

    async def get_by_id(self, task_id: str) -> TaskEntity | None:
        row = await self._get_model(task_id)
        return _to_entity(row) if row else None

    async def find_by_asset_and_stage(
        self, asset_id: str, stage_id: str
    ) -> TaskEntity | None:
        """Return the newest task for the asset at the stage."""
        result = await self.db.execute(
            select(Task)
            .where(Task.asset_id == asset_id, Task.workflow_stage_id == stage_id)
            .order_by(Task.created_at.desc(), Task.id.desc())
            .limit(1)
        )
        row = result.scalar_one_or_none()
        return _to_entity(row) if row else None

    async def get_tasks_by_asset_id(self, asset_id: str) -> list[TaskEntity]:
        result = await self.db.execute(
            select(Task).where(Task.asset_id == asset_id).order_by(Task.created_at)
        )
        return [_to_entity(t) for t in result.scalars().all()]

    async def add(self, task: TaskEntity) -> TaskEntity:
        """Stage a new task; the returned entity carries its generated id."""
        task_id = task.id or generate_cuid()
        now = utc_now()
        row = Task(
            id=task_id,
            project_id=task.project_id,
            asset_id=task.asset_id,
            workflow_id=task.workflow_id,
            workflow_stage_id=task.workflow_stage_id,
            status=task.status.value,
            assigned_to_user_id=task.assigned_to_user_id,
            last_worked_on_by_user_id=task.last_worked_on_by_user_id,
            priority=task.priority,
            due_date=task.due_date,
            changes_required_at=(
                now if task.status == TaskStatus.CHANGES_REQUIRED else None
            ),
            created_at=task.created_at or now,
            updated_at=task.updated_at or now,
        )
        self.db.add(row)
        self._pending_adds += 1
        return replace(
            task,
            id=task_id,
            changes_required_at=row.changes_required_at,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    def remove(self, task: TaskEntity) -> None:
        """Stage the task for deletion by id."""
        if task.id is None:
            raise ValueError("Cannot remove a task without id")
        self._pending_removals.append(task.id)

    async def update_status(
        self,
        task: TaskEntity,
        new_status: TaskStatus,
        user_id: str,
        *,
        assign_to: str | None = None,
    ) -> TaskEntity:
        """Apply the status change (with timestamps and optional assignee) and flush it."""
        row = await self._get_model(task.id) if task.id else None
        if row is None:
            raise ResourceNotFoundException("task", str(task.id))
        updated = replace(task)
        updated.apply_status_change(new_status, user_id)
        if assign_to is not None:
            updated.assigned_to_user_id = assign_to
            row.assigned_to_user_id = assign_to
        for column in _STATUS_COLUMNS:
            value = getattr(updated, column)
            setattr(row, column, value.value if column == "status" else value)
        await self._flush("update_status")
        return updated

    async def save_changes(self) -> int:
        """Write staged adds and removals; return the number of affected rows."""
        removals, self._pending_removals = self._pending_removals, []
        affected, self._pending_adds = self._pending_adds, 0
        try:
            await self.db.flush()
            if removals:
                result = await self.db.execute(
                    delete(Task)
                    .where(Task.id.in_(removals))
                    .execution_options(synchronize_session="fetch")
                )
                affected += result.rowcount or 0
        except SQLAlchemyError as e:
            raise PersistenceException("save_changes", str(e)) from e
        return affected
