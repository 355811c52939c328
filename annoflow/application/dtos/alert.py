"""DTOs for management alerts raised by the workflow pipelines."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from annoflow.domain.enums import AlertType


@dataclass
class ManagementAlert:
    """Critical alert that requires management intervention.

    failure_reason is the short title; original_error the human-readable
    detail; rollback_error carries aggregated rollback failures when the
    alert comes from a failed rollback.
    """

    id: str
    type: AlertType
    task_id: str
    asset_id: str
    user_id: str
    failure_reason: str
    original_error: str
    created_at: datetime
    rollback_error: str | None = None
    is_resolved: bool = False
    resolution_notes: str | None = None
    resolved_by_user_id: str | None = None
    resolved_at: datetime | None = None
