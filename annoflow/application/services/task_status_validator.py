"""Task status transition rules (implements ITaskStatusValidator)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from annoflow.domain.enums import TaskStatus
from annoflow.domain.exceptions import InvalidStateException

if TYPE_CHECKING:
    from annoflow.domain.entities import TaskEntity

_READY_STATUSES = frozenset({
    TaskStatus.READY_FOR_ANNOTATION,
    TaskStatus.READY_FOR_REVIEW,
    TaskStatus.READY_FOR_COMPLETION,
})

# Target -> statuses it may be reached from. Targets missing here
# (NOT_STARTED, READY_FOR_*) are only ever set by the workflow itself.
_ALLOWED_SOURCES: dict[TaskStatus, frozenset[TaskStatus]] = {
    TaskStatus.IN_PROGRESS: _READY_STATUSES | {
        TaskStatus.SUSPENDED,
        TaskStatus.DEFERRED,
        TaskStatus.NOT_STARTED,
        TaskStatus.CHANGES_REQUIRED,
    },
    TaskStatus.SUSPENDED: _READY_STATUSES | {
        TaskStatus.IN_PROGRESS,
        TaskStatus.NOT_STARTED,
        TaskStatus.CHANGES_REQUIRED,
    },
    TaskStatus.DEFERRED: _READY_STATUSES | {
        TaskStatus.IN_PROGRESS,
        TaskStatus.NOT_STARTED,
        TaskStatus.CHANGES_REQUIRED,
    },
    TaskStatus.COMPLETED: frozenset({TaskStatus.IN_PROGRESS, TaskStatus.CHANGES_REQUIRED}),
    TaskStatus.VETOED: frozenset({TaskStatus.IN_PROGRESS}),
    TaskStatus.CHANGES_REQUIRED: frozenset({TaskStatus.COMPLETED}),
    TaskStatus.ARCHIVED: frozenset({TaskStatus.COMPLETED}),
}


class TaskStatusValidator:
    """Checks whether a task may move from its current status to a requested one."""

    def is_valid_transition(self, current: TaskStatus, target: TaskStatus) -> bool:
        """Return whether current -> target is allowed."""
        return current in _ALLOWED_SOURCES.get(target, frozenset())

    def validate_transition(self, task: TaskEntity, target: TaskStatus) -> None:
        """Raise InvalidStateException if task may not move to target."""
        if self.is_valid_transition(task.status, target):
            return
        if target not in _ALLOWED_SOURCES:
            message = f"Status {target.value} can only be set by the workflow"
        else:
            message = (
                f"Invalid status transition for task {task.id}: "
                f"{task.status.value} -> {target.value}"
            )
        raise InvalidStateException(
            message, current_status=task.status.value, target_status=target.value
        )
