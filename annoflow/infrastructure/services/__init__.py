"""Infrastructure service adapters."""

from annoflow.infrastructure.services.notification_service import (
    LogOnlyNotificationService,
)

__all__ = ["LogOnlyNotificationService"]
