"""Application DTOs (no dependency on ORM)."""

from annoflow.application.dtos.alert import ManagementAlert
from annoflow.application.dtos.data_source import WorkflowDataSources

__all__ = ["ManagementAlert", "WorkflowDataSources"]
