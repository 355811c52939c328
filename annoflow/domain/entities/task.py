"""Task domain entity.

A task binds one asset to one workflow stage. Status changes go through
apply_status_change so that status-specific timestamps stay consistent.
"""

from dataclasses import dataclass
from datetime import datetime

from annoflow.domain.enums import TaskStatus
from annoflow.shared.utils.datetime import utc_now


@dataclass
class TaskEntity:
    """Domain entity for a unit of work on an asset at a workflow stage."""

    id: str | None
    asset_id: str
    project_id: str
    workflow_id: str
    workflow_stage_id: str
    status: TaskStatus
    assigned_to_user_id: str | None = None
    last_worked_on_by_user_id: str | None = None
    priority: int = 0
    due_date: datetime | None = None
    completed_at: datetime | None = None
    archived_at: datetime | None = None
    suspended_at: datetime | None = None
    deferred_at: datetime | None = None
    vetoed_at: datetime | None = None
    changes_required_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def is_assigned_to(self, user_id: str) -> bool:
        """Return whether the task is assigned to the given user."""
        return self.assigned_to_user_id is not None and self.assigned_to_user_id == user_id

    def apply_status_change(self, target_status: TaskStatus, user_id: str) -> None:
        """Set status in place and stamp the matching timestamp.

        Raises:
            ValueError: user_id is empty.
        """
        if not user_id:
            raise ValueError("user_id is required to change task status")
        now = utc_now()
        self.status = target_status
        self.updated_at = now
        self.last_worked_on_by_user_id = user_id
        if target_status == TaskStatus.SUSPENDED:
            self.suspended_at = now
        elif target_status == TaskStatus.DEFERRED:
            self.deferred_at = now
        elif target_status == TaskStatus.COMPLETED:
            self.completed_at = now
        elif target_status == TaskStatus.ARCHIVED:
            # archived work is also finished work
            self.archived_at = now
            self.completed_at = now
        elif target_status == TaskStatus.VETOED:
            self.vetoed_at = now
        elif target_status == TaskStatus.CHANGES_REQUIRED:
            self.changes_required_at = now
