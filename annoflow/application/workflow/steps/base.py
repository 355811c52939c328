"""Pipeline step protocol shared by the completion and veto pipelines."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from annoflow.application.workflow.context import PipelineContext


class PipelineStep(Protocol):
    """A single rollback-capable operation in a workflow pipeline.

    execute signals failure by raising an AnnoflowException subclass.
    rollback never raises for expected failures; it returns False so the
    pipeline can keep rolling back the remaining steps.
    """

    name: str

    async def execute(self, context: PipelineContext) -> PipelineContext:
        """Run the step's default operation and return the updated context."""

    async def rollback(self, context: PipelineContext) -> bool:
        """Undo the step's effects recorded in context; True on success."""
