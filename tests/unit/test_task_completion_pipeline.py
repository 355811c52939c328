"""TaskCompletionPipeline unit tests with mocked repositories and steps."""

import asyncio
from dataclasses import replace
from unittest.mock import AsyncMock, MagicMock

import pytest

from annoflow.application.workflow import TaskCompletionPipeline
from annoflow.domain.enums import AlertType, TaskStatus, WorkflowStageType
from annoflow.domain.exceptions import PersistenceException, TransferFailedException
from tests.factories import make_asset, make_stage, make_task

REVIEW_STAGE = make_stage("stage-review", WorkflowStageType.REVISION, "ds-2", order=2)


def _step(name: str, calls: list[str]) -> MagicMock:
    """Step double whose actions and rollback record their invocation order."""
    step = MagicMock()
    step.name = name

    async def _rollback(context):
        calls.append(f"rollback:{name}")
        return True

    step.rollback = AsyncMock(side_effect=_rollback)
    return step


@pytest.fixture
def pipeline_mocks():
    """Pipeline over an IN_PROGRESS task t1 at the annotation stage with a REVISION successor."""
    calls: list[str] = []
    task_repo = AsyncMock()
    task_repo.get_by_id = AsyncMock(return_value=make_task())
    asset_repo = AsyncMock()
    asset_repo.get_by_id = AsyncMock(return_value=make_asset())
    stage_repo = AsyncMock()
    stage_repo.get_by_id = AsyncMock(return_value=make_stage())
    resolver = AsyncMock()
    resolver.get_next_stage = AsyncMock(return_value=REVIEW_STAGE)
    alert_service = AsyncMock()

    status_step = _step("TaskStatusUpdateStep", calls)

    async def _update_status(context, status):
        calls.append(f"status:{status.value}")
        context.task = replace(context.task, status=status)
        return context

    status_step.update_status = AsyncMock(side_effect=_update_status)

    transfer_step = _step("AssetTransferStep", calls)

    async def _transfer(context):
        calls.append("transfer")
        context.asset.data_source_id = context.target_stage.target_data_source_id
        return context

    transfer_step.transfer_asset = AsyncMock(side_effect=_transfer)

    management_step = _step("TaskManagementStep", calls)

    async def _manage(context):
        calls.append("manage")
        context.next_task = make_task(
            "t2", TaskStatus.NOT_STARTED, stage_id="stage-review", assigned_to=None
        )
        return context

    management_step.create_or_update_task_for_target_stage = AsyncMock(side_effect=_manage)

    pipeline = TaskCompletionPipeline(
        task_repo,
        asset_repo,
        stage_repo,
        resolver,
        status_step,
        transfer_step,
        management_step,
        alert_service,
    )
    return {
        "pipeline": pipeline,
        "calls": calls,
        "task_repo": task_repo,
        "resolver": resolver,
        "status_step": status_step,
        "transfer_step": transfer_step,
        "management_step": management_step,
        "alert_service": alert_service,
    }


async def test_complete_advances_to_next_stage(pipeline_mocks) -> None:
    """Happy path: COMPLETED, asset transferred, successor task returned as created_task."""
    m = pipeline_mocks

    result = await m["pipeline"].execute("t1", "user123")

    assert result.is_success
    assert result.updated_task.status == TaskStatus.COMPLETED
    assert result.created_task.id == "t2"
    assert result.created_task.status == TaskStatus.NOT_STARTED
    assert m["calls"] == ["status:COMPLETED", "transfer", "manage"]
    m["resolver"].get_next_stage.assert_awaited_once_with("stage-annotation")


async def test_task_not_found_fails_without_running_steps(pipeline_mocks) -> None:
    m = pipeline_mocks
    m["task_repo"].get_by_id.return_value = None

    result = await m["pipeline"].execute("missing", "user123")

    assert not result.is_success
    assert result.error_message == "Task not found with ID: missing"
    assert result.error_code == "RESOURCE_NOT_FOUND"
    assert m["calls"] == []


@pytest.mark.parametrize(
    "status",
    [s for s in TaskStatus if s != TaskStatus.IN_PROGRESS],
)
async def test_only_in_progress_tasks_can_be_completed(pipeline_mocks, status) -> None:
    """Every other status fails with 'cannot be completed' and performs no mutation."""
    m = pipeline_mocks
    m["task_repo"].get_by_id.return_value = make_task(status=status)

    result = await m["pipeline"].execute("t1", "user123")

    assert not result.is_success
    assert "cannot be completed" in result.error_message
    assert result.error_code == "INVALID_STATE"
    assert m["calls"] == []
    m["task_repo"].update_status.assert_not_awaited()


async def test_task_assigned_to_other_user_is_denied(pipeline_mocks) -> None:
    m = pipeline_mocks

    result = await m["pipeline"].execute("t1", "someone-else")

    assert not result.is_success
    assert result.error_code == "PERMISSION_DENIED"
    assert m["calls"] == []


async def test_final_stage_completes_without_successor(pipeline_mocks) -> None:
    """No next stage: transfer and task management are skipped, created_task is None."""
    m = pipeline_mocks
    m["resolver"].get_next_stage.return_value = None

    result = await m["pipeline"].execute("t1", "user123")

    assert result.is_success
    assert result.updated_task.status == TaskStatus.COMPLETED
    assert result.created_task is None
    assert m["calls"] == ["status:COMPLETED"]


async def test_transfer_failure_rolls_back_status_once(pipeline_mocks) -> None:
    """Asset transfer failure: status rollback exactly once, no successor task, failure message kept."""
    m = pipeline_mocks
    m["transfer_step"].transfer_asset.side_effect = TransferFailedException(
        "a1", "ds-2", "bucket unavailable"
    )

    result = await m["pipeline"].execute("t1", "user123")

    assert not result.is_success
    assert "Asset transfer failed" in result.error_message
    assert result.error_code == "TRANSFER_FAILED"
    m["status_step"].rollback.assert_awaited_once()
    m["transfer_step"].rollback.assert_not_awaited()
    m["management_step"].create_or_update_task_for_target_stage.assert_not_awaited()
    assert result.created_task is None
    m["alert_service"].create_alert.assert_not_awaited()


async def test_management_failure_rolls_back_in_reverse_order(pipeline_mocks) -> None:
    m = pipeline_mocks
    m["management_step"].create_or_update_task_for_target_stage.side_effect = (
        PersistenceException("add_task", "constraint violated")
    )

    result = await m["pipeline"].execute("t1", "user123")

    assert not result.is_success
    assert result.error_code == "PERSISTENCE_ERROR"
    assert m["calls"] == [
        "status:COMPLETED",
        "transfer",
        "rollback:AssetTransferStep",
        "rollback:TaskStatusUpdateStep",
    ]


async def test_rollback_failure_raises_alert_and_keeps_original_error(pipeline_mocks) -> None:
    m = pipeline_mocks
    m["transfer_step"].transfer_asset.side_effect = TransferFailedException(
        "a1", "ds-2", "bucket unavailable"
    )
    m["status_step"].rollback.side_effect = None
    m["status_step"].rollback.return_value = False

    result = await m["pipeline"].execute("t1", "user123")

    assert result.error_message.startswith("Asset transfer failed")
    assert result.rollback_failed
    assert result.rollback_errors == ["TaskStatusUpdateStep: rollback failed"]
    m["alert_service"].create_alert.assert_awaited_once()
    args = m["alert_service"].create_alert.await_args.args
    assert args[0] == AlertType.PIPELINE_ROLLBACK_FAILED
    assert args[4] == "TaskCompletionPipeline rollback failed"
    assert args[5] == result.error_message


async def test_rollback_alert_can_be_disabled(pipeline_mocks) -> None:
    m = pipeline_mocks
    pipeline = m["pipeline"]
    pipeline._alert_on_rollback_failure = False
    m["transfer_step"].transfer_asset.side_effect = TransferFailedException("a1", "ds-2", "x")
    m["status_step"].rollback.side_effect = RuntimeError("db gone")

    result = await pipeline.execute("t1", "user123")

    assert result.rollback_errors == ["TaskStatusUpdateStep: db gone"]
    m["alert_service"].create_alert.assert_not_awaited()


async def test_alert_sink_failure_does_not_replace_result(pipeline_mocks) -> None:
    m = pipeline_mocks
    m["transfer_step"].transfer_asset.side_effect = TransferFailedException("a1", "ds-2", "x")
    m["status_step"].rollback.side_effect = None
    m["status_step"].rollback.return_value = False
    m["alert_service"].create_alert.side_effect = RuntimeError("alert store down")

    result = await m["pipeline"].execute("t1", "user123")

    assert not result.is_success
    assert result.error_code == "TRANSFER_FAILED"


async def test_unexpected_error_rolls_back_then_propagates(pipeline_mocks) -> None:
    m = pipeline_mocks
    m["transfer_step"].transfer_asset.side_effect = RuntimeError("boom")

    with pytest.raises(RuntimeError, match="boom"):
        await m["pipeline"].execute("t1", "user123")
    m["status_step"].rollback.assert_awaited_once()


async def test_cancelled_before_start_runs_nothing(pipeline_mocks) -> None:
    m = pipeline_mocks
    cancel = asyncio.Event()
    cancel.set()

    result = await m["pipeline"].execute("t1", "user123", cancel_event=cancel)

    assert not result.is_success
    assert result.error_code == "PIPELINE_CANCELLED"
    assert m["calls"] == []


async def test_cancelled_between_steps_rolls_back_executed(pipeline_mocks) -> None:
    """Cancellation is honored at the next step boundary; completed steps are undone."""
    m = pipeline_mocks
    cancel = asyncio.Event()
    original = m["status_step"].update_status.side_effect

    async def _update_then_cancel(context, status):
        await original(context, status)
        cancel.set()
        return context

    m["status_step"].update_status.side_effect = _update_then_cancel

    result = await m["pipeline"].execute("t1", "user123", cancel_event=cancel)

    assert result.error_code == "PIPELINE_CANCELLED"
    assert m["calls"] == ["status:COMPLETED", "rollback:TaskStatusUpdateStep"]


async def test_can_execute_checks_assignment(pipeline_mocks) -> None:
    m = pipeline_mocks
    pipeline = m["pipeline"]

    assert await pipeline.can_execute("t1", "user123") is True
    assert await pipeline.can_execute("t1", "someone-else") is False
    m["task_repo"].get_by_id.return_value = None
    assert await pipeline.can_execute("t1", "user123") is False
