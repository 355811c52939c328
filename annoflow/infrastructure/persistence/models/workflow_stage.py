"""WorkflowStage and WorkflowStageConnection ORM models (workflow graph)."""

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from annoflow.infrastructure.persistence.database import Base
from annoflow.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin


class WorkflowStage(CuidMixin, TimestampMixin, Base):
    """Node of a workflow graph. Table: workflow_stage."""

    __tablename__ = "workflow_stage"

    workflow_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    stage_type: Mapped[str] = mapped_column(String(32), nullable=False)
    stage_order: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0"
    )
    is_initial: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default="false"
    )
    is_final: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default="false"
    )
    target_data_source_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("data_source.id", ondelete="SET NULL"), nullable=True
    )

    __table_args__ = (Index("ix_workflow_stage_workflow_order", "workflow_id", "stage_order"),)


class WorkflowStageConnection(CuidMixin, TimestampMixin, Base):
    """Directed edge between stages; condition NULL marks the default edge."""

    __tablename__ = "workflow_stage_connection"

    from_stage_id: Mapped[str] = mapped_column(
        String, ForeignKey("workflow_stage.id", ondelete="CASCADE"), nullable=False, index=True
    )
    to_stage_id: Mapped[str] = mapped_column(
        String, ForeignKey("workflow_stage.id", ondelete="CASCADE"), nullable=False, index=True
    )
    condition: Mapped[str | None] = mapped_column(String(255), nullable=True)
