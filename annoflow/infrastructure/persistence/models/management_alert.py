"""ManagementAlert ORM model. Critical workflow failures awaiting management action."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from annoflow.infrastructure.persistence.database import Base
from annoflow.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin


class ManagementAlert(CuidMixin, TimestampMixin, Base):
    """Alert raised by the workflow pipelines. Table: management_alert."""

    __tablename__ = "management_alert"

    type: Mapped[str] = mapped_column(String(64), nullable=False)
    task_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    asset_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    user_id: Mapped[str] = mapped_column(String, nullable=False)
    failure_reason: Mapped[str] = mapped_column(String(500), nullable=False)
    original_error: Mapped[str] = mapped_column(Text, nullable=False)
    rollback_error: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_resolved: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default="false"
    )
    resolution_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    resolved_by_user_id: Mapped[str | None] = mapped_column(String, nullable=True)
    resolved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (Index("ix_management_alert_unresolved", "is_resolved", "created_at"),)
