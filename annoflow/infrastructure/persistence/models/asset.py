"""Asset ORM model. A labeled resource stored in one data source at a time."""

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from annoflow.infrastructure.persistence.database import Base
from annoflow.infrastructure.persistence.models.mixins import ProjectScopedModel


class Asset(ProjectScopedModel, Base):
    """Asset with its current data source. Table: asset."""

    __tablename__ = "asset"

    data_source_id: Mapped[str] = mapped_column(
        String, ForeignKey("data_source.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    filename: Mapped[str] = mapped_column(String(1024), nullable=False)
    status: Mapped[str] = mapped_column(
        String(32), nullable=False, default="IMPORTED", server_default="IMPORTED"
    )
