"""Step runner shared by the workflow pipelines: ordered execution, cancellation, reverse rollback."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from annoflow.domain.enums import AlertType
from annoflow.domain.exceptions import PipelineCancelledException
from annoflow.shared.telemetry.logging import get_logger
from annoflow.shared.telemetry.tracing import add_span_event

if TYPE_CHECKING:
    from annoflow.application.interfaces.services import IManagementAlertService
    from annoflow.application.workflow.context import PipelineContext
    from annoflow.application.workflow.steps.base import PipelineStep

logger = get_logger(__name__)

StepAction = Callable[["PipelineContext"], Awaitable["PipelineContext"]]


class StepRunner:
    """Runs steps for one pipeline invocation and remembers which ones succeeded."""

    def __init__(
        self,
        pipeline_name: str,
        context: PipelineContext,
        cancel_event: asyncio.Event | None = None,
    ) -> None:
        self.pipeline_name = pipeline_name
        self.context = context
        self._cancel_event = cancel_event
        self._executed: list[PipelineStep] = []

    async def run(self, step: PipelineStep, action: StepAction | None = None) -> PipelineContext:
        """Run action (default step.execute) and record the step for rollback.

        A step that raises is not recorded: its own rollback is never invoked.

        Raises:
            PipelineCancelledException: cancel_event was set before the step started.
        """
        if self._cancel_event is not None and self._cancel_event.is_set():
            raise PipelineCancelledException(self.pipeline_name, str(self.context.task.id))

        logger.debug("%s: running %s", self.pipeline_name, step.name)
        self.context = await (action or step.execute)(self.context)
        self._executed.append(step)
        add_span_event("pipeline.step.completed", {"step": step.name})
        return self.context

    async def rollback(self) -> list[str]:
        """Roll back executed steps in reverse order; return rollback error descriptions."""
        errors: list[str] = []
        for step in reversed(self._executed):
            try:
                succeeded = await step.rollback(self.context)
            except Exception as e:
                logger.critical(
                    "%s: rollback of %s raised for task %s",
                    self.pipeline_name,
                    step.name,
                    self.context.task.id,
                    exc_info=True,
                )
                errors.append(f"{step.name}: {e}")
                continue
            if not succeeded:
                logger.critical(
                    "%s: rollback of %s failed for task %s",
                    self.pipeline_name,
                    step.name,
                    self.context.task.id,
                )
                errors.append(f"{step.name}: rollback failed")
        self._executed.clear()
        return errors


async def alert_rollback_failure(
    alert_service: IManagementAlertService,
    pipeline_name: str,
    context: PipelineContext,
    original_error: str,
    rollback_errors: list[str],
) -> None:
    """Raise a PIPELINE_ROLLBACK_FAILED alert; alert sink failures are only logged."""
    try:
        await alert_service.create_alert(
            AlertType.PIPELINE_ROLLBACK_FAILED,
            str(context.task.id),
            context.asset.id,
            context.user_id,
            f"{pipeline_name} rollback failed",
            original_error,
            "; ".join(rollback_errors),
        )
    except Exception:
        logger.critical(
            "Failed to raise rollback failure alert for task %s (original error: %s)",
            context.task.id,
            original_error,
            exc_info=True,
        )


async def rollback_and_report(
    runner: StepRunner,
    alert_service: IManagementAlertService,
    original_error: str,
    *,
    alert_on_failure: bool = True,
) -> list[str]:
    """Roll back the runner's executed steps and alert when any rollback failed."""
    rollback_errors = await runner.rollback()
    if rollback_errors:
        logger.critical(
            "%s: rollback incomplete for task %s after '%s': %s",
            runner.pipeline_name,
            runner.context.task.id,
            original_error,
            "; ".join(rollback_errors),
        )
        if alert_on_failure:
            await alert_rollback_failure(
                alert_service,
                runner.pipeline_name,
                runner.context,
                original_error,
                rollback_errors,
            )
    return rollback_errors
