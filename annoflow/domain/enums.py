"""Domain enumerations for annoflow.

Enums represent fixed sets of domain values (task status, stage type,
alert type, data source type).
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class TaskStatus(_ValuesMixin, str, Enum):
    """Task lifecycle status.

    A task is "active" while it still represents pending work at its stage
    (see ACTIVE_TASK_STATUSES); COMPLETED, VETOED and ARCHIVED tasks are
    historical.
    """

    NOT_STARTED = "NOT_STARTED"
    READY_FOR_ANNOTATION = "READY_FOR_ANNOTATION"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    READY_FOR_REVIEW = "READY_FOR_REVIEW"
    READY_FOR_COMPLETION = "READY_FOR_COMPLETION"
    VETOED = "VETOED"
    CHANGES_REQUIRED = "CHANGES_REQUIRED"
    SUSPENDED = "SUSPENDED"
    ARCHIVED = "ARCHIVED"
    DEFERRED = "DEFERRED"

    @property
    def is_active(self) -> bool:
        """Return whether the status counts as pending work at its stage."""
        return self in ACTIVE_TASK_STATUSES


ACTIVE_TASK_STATUSES: frozenset[TaskStatus] = frozenset({
    TaskStatus.NOT_STARTED,
    TaskStatus.IN_PROGRESS,
    TaskStatus.READY_FOR_ANNOTATION,
    TaskStatus.READY_FOR_REVIEW,
    TaskStatus.READY_FOR_COMPLETION,
})


class WorkflowStageType(_ValuesMixin, str, Enum):
    """Kind of work performed at a workflow stage."""

    ANNOTATION = "ANNOTATION"
    REVISION = "REVISION"
    COMPLETION = "COMPLETION"


class AlertType(_ValuesMixin, str, Enum):
    """Management alert categories raised by the workflow pipelines."""

    PIPELINE_ROLLBACK_FAILED = "PIPELINE_ROLLBACK_FAILED"
    ASSET_TRANSFER_FAILED = "ASSET_TRANSFER_FAILED"
    TASK_STATUS_UPDATE_FAILED = "TASK_STATUS_UPDATE_FAILED"
    DATA_INTEGRITY_VIOLATION = "DATA_INTEGRITY_VIOLATION"


class DataSourceType(_ValuesMixin, str, Enum):
    """Backing store kind of a project data source."""

    MINIO_BUCKET = "MINIO_BUCKET"
    S3_BUCKET = "S3_BUCKET"
    LOCAL_DIRECTORY = "LOCAL_DIRECTORY"
