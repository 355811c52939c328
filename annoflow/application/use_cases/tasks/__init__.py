"""Task use cases."""

from annoflow.application.use_cases.tasks.task_status_operations import TaskStatusService

__all__ = ["TaskStatusService"]
