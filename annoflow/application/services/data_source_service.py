"""Data source provisioning for project workflows (implements IDataSourceProvisioningService)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from annoflow.application.dtos.data_source import WorkflowDataSources
from annoflow.domain.enums import DataSourceType
from annoflow.shared.telemetry.logging import get_logger

if TYPE_CHECKING:
    from annoflow.application.interfaces.repositories import IDataSourceRepository
    from annoflow.domain.entities import DataSourceEntity

logger = get_logger(__name__)

_REVIEW_NAME_MARKERS = ("review", "revision")


class DataSourceProvisioningService:
    """Finds a project's annotation/review data sources, creating defaults when missing."""

    def __init__(
        self,
        data_source_repo: IDataSourceRepository,
        *,
        annotation_source_name: str = "Default Annotation Source",
        review_source_name: str = "Default Review Source",
    ) -> None:
        self._repo = data_source_repo
        self._annotation_source_name = annotation_source_name
        self._review_source_name = review_source_name

    async def ensure_required_data_sources_exist(
        self, project_id: str, include_review_stage: bool = False
    ) -> WorkflowDataSources:
        """Return the project's annotation (and optionally review) data sources.

        The annotation source is the project's default data source, else its
        oldest. With include_review_stage the review source is the first
        whose name mentions review/revision. Missing sources are created.
        """
        sources = await self._repo.get_by_project(project_id)

        annotation = next((s for s in sources if s.is_default), None)
        if annotation is None and sources:
            annotation = sources[0]
        if annotation is None:
            annotation = await self._create(
                project_id,
                self._annotation_source_name,
                "Default data source for annotation stages",
                is_default=True,
            )

        review = None
        if include_review_stage:
            review = next(
                (s for s in sources if s.id != annotation.id and _is_review_source(s)),
                None,
            )
            if review is None:
                review = await self._create(
                    project_id,
                    self._review_source_name,
                    "Default data source for review stages",
                )

        return WorkflowDataSources(annotation_data_source=annotation, review_data_source=review)

    async def _create(
        self,
        project_id: str,
        name: str,
        description: str,
        *,
        is_default: bool = False,
    ) -> DataSourceEntity:
        logger.info("Creating data source '%s' for project %s", name, project_id)
        return await self._repo.create(
            project_id,
            name,
            DataSourceType.MINIO_BUCKET,
            description=description,
            is_default=is_default,
        )


def _is_review_source(source: DataSourceEntity) -> bool:
    name = source.name.lower()
    return any(marker in name for marker in _REVIEW_NAME_MARKERS)
