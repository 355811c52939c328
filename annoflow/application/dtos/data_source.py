"""DTOs for data-source provisioning."""

from __future__ import annotations

from dataclasses import dataclass

from annoflow.domain.entities.data_source import DataSourceEntity


@dataclass(frozen=True)
class WorkflowDataSources:
    """Data sources a project workflow needs (annotation, optional review)."""

    annotation_data_source: DataSourceEntity | None
    review_data_source: DataSourceEntity | None = None
