"""Task workflow pipelines: context, steps, rollback orchestration and results."""

from annoflow.application.workflow.completion_pipeline import TaskCompletionPipeline
from annoflow.application.workflow.context import PipelineContext
from annoflow.application.workflow.result import PipelineResult
from annoflow.application.workflow.veto_pipeline import TaskVetoPipeline

__all__ = [
    "PipelineContext",
    "PipelineResult",
    "TaskCompletionPipeline",
    "TaskVetoPipeline",
]
