"""Asset domain entity.

An asset is the labeled resource (e.g. an image) that moves through workflow
stages. Its current data source is owned by the asset row; only import and
the workflow pipelines change it.
"""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class AssetEntity:
    """Domain entity for an asset stored in a project data source."""

    id: str
    project_id: str
    data_source_id: str
    filename: str
    status: str = "IMPORTED"
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def is_in_data_source(self, data_source_id: str) -> bool:
        """Return whether the asset currently lives in the given data source."""
        return self.data_source_id == data_source_id
