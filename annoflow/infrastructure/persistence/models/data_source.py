"""DataSource ORM model. Storage location owned by a project."""

from sqlalchemy import Boolean, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from annoflow.infrastructure.persistence.database import Base
from annoflow.infrastructure.persistence.models.mixins import ProjectScopedModel


class DataSource(ProjectScopedModel, Base):
    """Project data source (bucket/prefix or directory). Table: data_source."""

    __tablename__ = "data_source"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    source_type: Mapped[str] = mapped_column(String(32), nullable=False)
    storage_prefix: Mapped[str] = mapped_column(String(1024), nullable=False)
    is_default: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default="false"
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (Index("ix_data_source_project_name", "project_id", "name"),)
