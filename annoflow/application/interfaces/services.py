"""Service interfaces (ports) for the application layer.

Protocols define contracts for the collaborators the workflow pipelines
consume (DIP): stage topology, asset relocation, data-source provisioning,
management alerts, notifications and object storage.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from annoflow.application.dtos.alert import ManagementAlert
    from annoflow.application.dtos.data_source import WorkflowDataSources
    from annoflow.domain.entities import TaskEntity, WorkflowStageEntity
    from annoflow.domain.enums import AlertType, TaskStatus


# Workflow stage resolver interface
class IWorkflowStageResolver(Protocol):
    """Protocol for next-stage / first-annotation-stage lookups on the workflow graph."""

    async def get_next_stage(
        self, current_stage_id: str, condition: str | None = None
    ) -> WorkflowStageEntity | None:
        """Return the successor stage, or None when the stage is final."""

    async def get_first_annotation_stage(
        self, workflow_id: str
    ) -> WorkflowStageEntity | None:
        """Return the lowest-ordered ANNOTATION stage of the workflow, or None."""


# Asset relocation interface
class IAssetTransferService(Protocol):
    """Protocol for physically relocating an asset between data sources."""

    async def transfer_asset_to_data_source(
        self, asset_id: str, data_source_id: str
    ) -> bool:
        """Move the asset's stored object and repoint the asset. False on failure."""


# Data source provisioning interface
class IDataSourceProvisioningService(Protocol):
    """Protocol for resolving (and creating when missing) a project's workflow data sources."""

    async def ensure_required_data_sources_exist(
        self, project_id: str, include_review_stage: bool = False
    ) -> WorkflowDataSources:
        """Return the project's annotation (and optionally review) data sources."""


# Management alert interface
class IManagementAlertService(Protocol):
    """Protocol for the management alert sink."""

    async def create_alert(
        self,
        alert_type: AlertType,
        task_id: str,
        asset_id: str,
        user_id: str,
        title: str,
        detail: str,
        extra: str | None = None,
    ) -> ManagementAlert:
        """Record an alert and send critical notifications for it."""

    async def resolve_alert(
        self, alert_id: str, resolved_by_user_id: str, resolution_notes: str
    ) -> bool:
        """Resolve an alert with management notes. False when not found."""


# Notification interface
class INotificationService(Protocol):
    """Protocol for sending notifications (e.g. email) to operators."""

    async def send(self, to_emails: list[str], subject: str, body: str) -> None:
        """Send a notification to the given recipients."""


# Task status validator interface
class ITaskStatusValidator(Protocol):
    """Protocol for user-initiated task status transition rules."""

    def is_valid_transition(self, current: TaskStatus, target: TaskStatus) -> bool:
        """Return whether current -> target is an allowed transition."""

    def validate_transition(self, task: TaskEntity, target: TaskStatus) -> None:
        """Raise InvalidStateException if the task may not move to target."""


# Object storage interface
class IStorageService(Protocol):
    """Protocol for object storage backends (local, S3-compatible)."""

    async def exists(self, storage_ref: str) -> bool:
        """Return True if the object exists."""

    async def move(self, source_ref: str, target_ref: str) -> None:
        """Move an object; raises StorageException on failure."""
