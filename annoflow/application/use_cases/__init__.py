"""Application use cases: one entry point per workflow."""

from annoflow.application.use_cases.tasks import TaskStatusService

__all__ = ["TaskStatusService"]
