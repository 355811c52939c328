"""Alert notification: log-only sender."""

from __future__ import annotations

import logging

from annoflow.shared.telemetry.logging import get_logger
from annoflow.shared.utils.datetime import utc_now

logger = get_logger(__name__)


class LogOnlyNotificationService:
    """INotificationService implementation that logs instead of sending email.

    Use when no mail transport is configured.
    """

    async def send(
        self,
        to_emails: list[str],
        subject: str,
        body: str,
    ) -> None:
        """Log the notification; no actual email sent."""
        recipients = list(to_emails or [])
        subject_preview = (subject or "")[:80]
        if not recipients:
            logger.info(
                "Alert notify: no recipients, skipping send (subject=%r)",
                subject_preview,
            )
            return
        logger.warning(
            "Alert notify: would send to %d recipients (subject=%r)",
            len(recipients),
            subject_preview,
        )
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Alert notify recipients: %s (at %s)",
                recipients,
                utc_now().isoformat(),
            )
        logger.debug("Alert notify body (first 500 chars): %s", (body or "")[:500])
