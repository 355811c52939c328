"""Domain exceptions for annoflow.

Defines domain-level exceptions that represent business rule violations
and the failure kinds a workflow pipeline step can signal. These exceptions
are independent of infrastructure concerns; pipelines translate them into
failed PipelineResult values.
"""

from typing import Any


class AnnoflowException(Exception):
    """Base exception for all annoflow errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Pipelines map these to
    PipelineResult failures using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. task_id, asset_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


class ResourceNotFoundException(AnnoflowException):
    """Raised when a task, asset, stage or resolver target is not found."""

    def __init__(
        self,
        resource_type: str,
        resource_id: str,
        message: str | None = None,
    ) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'task', 'workflow_stage').
            resource_id: The ID that was not found.
            message: Optional message overriding the default wording.
        """
        super().__init__(
            message or f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class PreconditionException(AnnoflowException):
    """Raised when a step is invoked without the context it requires."""

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(message, "PRECONDITION_FAILED", details)


class InvalidStateException(AnnoflowException):
    """Raised when a task status does not permit the requested transition."""

    def __init__(
        self,
        message: str,
        current_status: str | None = None,
        target_status: str | None = None,
    ) -> None:
        """Initialize with message and optional transition endpoints.

        Args:
            message: Description of the rejected transition.
            current_status: Status the task currently has.
            target_status: Status that was requested.
        """
        details: dict[str, Any] = {}
        if current_status:
            details["current_status"] = current_status
        if target_status:
            details["target_status"] = target_status
        super().__init__(message, "INVALID_STATE", details)


class InvalidOperationException(AnnoflowException):
    """Raised when an operation is not meaningful for the task's current stage."""

    def __init__(self, message: str, stage_type: str | None = None) -> None:
        details = {"stage_type": stage_type} if stage_type else {}
        super().__init__(message, "INVALID_OPERATION", details)


class AuthorizationException(AnnoflowException):
    """Raised when the acting user is not allowed to act on the task."""

    def __init__(
        self,
        resource: str | None = None,
        action: str | None = None,
        message: str = "Permission denied",
    ) -> None:
        """Initialize with optional resource, action, and message.

        Args:
            resource: Optional resource type (e.g. 'task').
            action: Optional action that was attempted (e.g. 'complete', 'veto').
            message: Human-readable message; default used when resource/action omitted.
        """
        if resource and action:
            message = f"Permission denied: {action} on {resource}"
        details: dict[str, Any] = {}
        if resource:
            details["resource"] = resource
        if action:
            details["action"] = action
        super().__init__(message, "PERMISSION_DENIED", details)


class TransferFailedException(AnnoflowException):
    """Raised when the asset relocation collaborator reports failure."""

    def __init__(self, asset_id: str, data_source_id: str | None, reason: str) -> None:
        """Initialize with asset, destination and reason.

        Args:
            asset_id: Asset that could not be relocated.
            data_source_id: Destination data source (None when it could not be resolved).
            reason: Human-readable reason.
        """
        super().__init__(
            f"Asset transfer failed: {reason}",
            "TRANSFER_FAILED",
            {"asset_id": asset_id, "data_source_id": data_source_id},
        )


class DataIntegrityException(AnnoflowException):
    """Raised when task history or the workflow graph is inconsistent.

    Always paired with a DATA_INTEGRITY_VIOLATION management alert raised
    by the code that detected the violation.
    """

    def __init__(self, message: str, task_id: str | None = None, asset_id: str | None = None) -> None:
        details: dict[str, Any] = {}
        if task_id:
            details["task_id"] = task_id
        if asset_id:
            details["asset_id"] = asset_id
        super().__init__(message, "DATA_INTEGRITY_VIOLATION", details)


class PersistenceException(AnnoflowException):
    """Raised when a store write (status update, task add/remove) fails."""

    def __init__(self, operation: str, reason: str) -> None:
        """Initialize with the failed operation and reason.

        Args:
            operation: Store operation that failed (e.g. 'update_status').
            reason: Underlying error description.
        """
        super().__init__(
            f"Persistence failed during {operation}: {reason}",
            "PERSISTENCE_ERROR",
            {"operation": operation, "reason": reason},
        )


class PipelineCancelledException(AnnoflowException):
    """Raised between steps when the caller abandoned the pipeline run."""

    def __init__(self, pipeline: str, task_id: str) -> None:
        super().__init__(
            f"{pipeline} cancelled for task {task_id}",
            "PIPELINE_CANCELLED",
            {"pipeline": pipeline, "task_id": task_id},
        )
