"""Management alert sink for workflow failures (implements IManagementAlertService)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from annoflow.application.dtos.alert import ManagementAlert
from annoflow.shared.telemetry.logging import get_logger
from annoflow.shared.utils.datetime import utc_now
from annoflow.shared.utils.generators import generate_cuid

if TYPE_CHECKING:
    from annoflow.application.interfaces.repositories import IManagementAlertRepository
    from annoflow.application.interfaces.services import INotificationService
    from annoflow.domain.enums import AlertType

logger = get_logger(__name__)


class ManagementAlertService:
    """Records alerts that need management intervention and notifies operators.

    Alerts go to alert_repo when one is given; otherwise they are kept in
    memory for the lifetime of the service (tests, scripts).
    """

    def __init__(
        self,
        alert_repo: IManagementAlertRepository | None = None,
        *,
        notification_service: INotificationService | None = None,
        recipients: list[str] | None = None,
    ) -> None:
        self._repo = alert_repo
        self._notification_service = notification_service
        self._recipients = list(recipients or [])
        self._alerts: dict[str, ManagementAlert] = {}

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
        """Record an alert, log it at CRITICAL and send notifications."""
        alert = ManagementAlert(
            id=generate_cuid(),
            type=alert_type,
            task_id=task_id,
            asset_id=asset_id,
            user_id=user_id,
            failure_reason=title,
            original_error=detail,
            rollback_error=extra,
            created_at=utc_now(),
        )
        if self._repo is not None:
            alert = await self._repo.add(alert)
        else:
            self._alerts[alert.id] = alert

        logger.critical(
            "MANAGEMENT ALERT [%s] %s: task=%s asset=%s user=%s detail=%s%s",
            alert.type.value,
            title,
            task_id,
            asset_id,
            user_id,
            detail,
            f" extra={extra}" if extra else "",
        )
        await self.send_critical_notifications(alert)
        return alert

    async def send_critical_notifications(self, alert: ManagementAlert) -> None:
        """Notify configured recipients; failures are logged, never raised."""
        if self._notification_service is None:
            return
        subject = f"[annoflow] {alert.type.value}: {alert.failure_reason}"
        body = "\n".join([
            f"Alert: {alert.id}",
            f"Type: {alert.type.value}",
            f"Task: {alert.task_id}",
            f"Asset: {alert.asset_id}",
            f"User: {alert.user_id}",
            f"Created: {alert.created_at.isoformat()}",
            "",
            alert.original_error,
            *([f"Rollback errors: {alert.rollback_error}"] if alert.rollback_error else []),
        ])
        try:
            await self._notification_service.send(self._recipients, subject, body)
        except Exception:
            logger.error("Failed to send notifications for alert %s", alert.id, exc_info=True)

    async def resolve_alert(
        self, alert_id: str, resolved_by_user_id: str, resolution_notes: str
    ) -> bool:
        """Mark an alert resolved. Returns False when the alert does not exist."""
        if self._repo is not None:
            resolved = await self._repo.mark_resolved(
                alert_id, resolved_by_user_id, resolution_notes
            )
        else:
            alert = self._alerts.get(alert_id)
            resolved = alert is not None
            if alert is not None:
                alert.is_resolved = True
                alert.resolved_by_user_id = resolved_by_user_id
                alert.resolution_notes = resolution_notes
                alert.resolved_at = utc_now()
        if resolved:
            logger.info("Alert %s resolved by %s", alert_id, resolved_by_user_id)
        else:
            logger.warning("Alert %s not found for resolution", alert_id)
        return resolved

    async def get_alert(self, alert_id: str) -> ManagementAlert | None:
        if self._repo is not None:
            return await self._repo.get_by_id(alert_id)
        return self._alerts.get(alert_id)
