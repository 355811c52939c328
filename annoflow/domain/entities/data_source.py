"""Data source domain entity (a storage location owned by a project)."""

from dataclasses import dataclass

from annoflow.domain.enums import DataSourceType


@dataclass
class DataSourceEntity:
    """Domain entity for a project data source.

    storage_prefix is the bucket/prefix (or directory) under which the
    data source's asset objects are stored.
    """

    id: str
    project_id: str
    name: str
    source_type: DataSourceType
    storage_prefix: str
    is_default: bool = False
    description: str | None = None

    def object_ref(self, filename: str) -> str:
        """Return the storage reference of a file inside this data source."""
        return f"{self.storage_prefix.rstrip('/')}/{filename}"
