"""Management alert repository (implements IManagementAlertRepository)."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from annoflow.application.dtos.alert import ManagementAlert
from annoflow.domain.enums import AlertType
from annoflow.infrastructure.persistence.models.management_alert import (
    ManagementAlert as ManagementAlertModel,
)
from annoflow.infrastructure.persistence.repositories.base import BaseRepository
from annoflow.shared.utils.datetime import utc_now


def _to_dto(a: ManagementAlertModel) -> ManagementAlert:
    """Map ManagementAlert ORM to the ManagementAlert DTO."""
    return ManagementAlert(
        id=a.id,
        type=AlertType(a.type),
        task_id=a.task_id,
        asset_id=a.asset_id,
        user_id=a.user_id,
        failure_reason=a.failure_reason,
        original_error=a.original_error,
        created_at=a.created_at,
        rollback_error=a.rollback_error,
        is_resolved=a.is_resolved,
        resolution_notes=a.resolution_notes,
        resolved_by_user_id=a.resolved_by_user_id,
        resolved_at=a.resolved_at,
    )


class ManagementAlertRepository(BaseRepository[ManagementAlertModel]):
    """Management alert repository. Implements IManagementAlertRepository."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, ManagementAlertModel)

    async def add(self, alert: ManagementAlert) -> ManagementAlert:
        row = ManagementAlertModel(
            id=alert.id,
            type=alert.type.value,
            task_id=alert.task_id,
            asset_id=alert.asset_id,
            user_id=alert.user_id,
            failure_reason=alert.failure_reason,
            original_error=alert.original_error,
            rollback_error=alert.rollback_error,
            created_at=alert.created_at,
            updated_at=alert.created_at,
        )
        self.db.add(row)
        await self._flush("add_alert")
        return _to_dto(row)

    async def get_by_id(self, alert_id: str) -> ManagementAlert | None:
        row = await self._get_model(alert_id)
        return _to_dto(row) if row else None

    async def mark_resolved(
        self, alert_id: str, resolved_by_user_id: str, resolution_notes: str
    ) -> bool:
        row = await self._get_model(alert_id)
        if row is None:
            return False
        row.is_resolved = True
        row.resolved_by_user_id = resolved_by_user_id
        row.resolution_notes = resolution_notes
        row.resolved_at = utc_now()
        await self._flush("resolve_alert")
        return True
