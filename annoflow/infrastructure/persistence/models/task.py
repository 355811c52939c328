"""Task ORM model. One unit of work on an asset at a workflow stage."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from annoflow.infrastructure.persistence.database import Base
from annoflow.infrastructure.persistence.models.mixins import ProjectScopedModel


class Task(ProjectScopedModel, Base):
    """Task bound to asset + workflow stage. Table: task."""

    __tablename__ = "task"

    asset_id: Mapped[str] = mapped_column(
        String, ForeignKey("asset.id", ondelete="CASCADE"), nullable=False, index=True
    )
    workflow_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    workflow_stage_id: Mapped[str] = mapped_column(
        String, ForeignKey("workflow_stage.id", ondelete="RESTRICT"), nullable=False
    )
    status: Mapped[str] = mapped_column(
        String(32), nullable=False, default="NOT_STARTED", server_default="NOT_STARTED"
    )
    assigned_to_user_id: Mapped[str | None] = mapped_column(String, nullable=True, index=True)
    last_worked_on_by_user_id: Mapped[str | None] = mapped_column(String, nullable=True)
    priority: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0"
    )
    due_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    archived_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    suspended_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    deferred_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    vetoed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    changes_required_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    __table_args__ = (
        Index("ix_task_asset_stage", "asset_id", "workflow_stage_id"),
        Index("ix_task_project_status", "project_id", "status"),
    )
