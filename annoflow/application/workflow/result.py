"""Pipeline result returned to request-handling code."""

from __future__ import annotations

from dataclasses import dataclass, field

from annoflow.domain.entities import TaskEntity


@dataclass(frozen=True)
class PipelineResult:
    """Outcome of a completion or veto pipeline run.

    Expected business failures (not found, invalid status, permission
    denied, step failures) are encoded with is_success=False; error_message
    always carries the originating failure, never a rollback failure.
    created_task is the task representing the asset's next unit of work
    (created or re-opened); None when the run did not produce one.
    """

    is_success: bool
    updated_task: TaskEntity | None = None
    created_task: TaskEntity | None = None
    error_message: str | None = None
    error_code: str | None = None
    rollback_errors: list[str] = field(default_factory=list)

    @classmethod
    def success(
        cls, updated_task: TaskEntity, created_task: TaskEntity | None = None
    ) -> PipelineResult:
        """Build a successful result."""
        return cls(is_success=True, updated_task=updated_task, created_task=created_task)

    @classmethod
    def failure(
        cls,
        error_message: str,
        *,
        error_code: str | None = None,
        rollback_errors: list[str] | None = None,
    ) -> PipelineResult:
        """Build a failed result."""
        return cls(
            is_success=False,
            error_message=error_message,
            error_code=error_code,
            rollback_errors=list(rollback_errors or []),
        )

    @property
    def rollback_failed(self) -> bool:
        """Return whether any step rollback failed during this run."""
        return bool(self.rollback_errors)
