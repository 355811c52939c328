"""TaskVetoPipeline unit tests with mocked repositories and steps."""

from dataclasses import replace
from unittest.mock import AsyncMock, MagicMock

import pytest

from annoflow.application.workflow import TaskVetoPipeline
from annoflow.domain.enums import TaskStatus, WorkflowStageType
from annoflow.domain.exceptions import DataIntegrityException
from tests.factories import make_asset, make_stage, make_task

REVIEW_STAGE = make_stage("stage-review", WorkflowStageType.REVISION, "ds-2", order=2)

INTEGRITY_MESSAGE = (
    "Invalid status: Annotation task must be COMPLETED or VETOED, but found IN_PROGRESS"
)


def _step(name: str, calls: list[str]) -> MagicMock:
    step = MagicMock()
    step.name = name

    async def _rollback(context):
        calls.append(f"rollback:{name}")
        return True

    step.rollback = AsyncMock(side_effect=_rollback)
    return step


@pytest.fixture
def veto_mocks():
    """Pipeline over an IN_PROGRESS review task t2 assigned to user123."""
    calls: list[str] = []
    contexts = []
    task_repo = AsyncMock()
    task_repo.get_by_id = AsyncMock(
        return_value=make_task("t2", stage_id="stage-review")
    )
    asset_repo = AsyncMock()
    asset_repo.get_by_id = AsyncMock(return_value=make_asset("ds-2"))
    stage_repo = AsyncMock()
    stage_repo.get_by_id = AsyncMock(return_value=REVIEW_STAGE)
    alert_service = AsyncMock()

    status_step = _step("TaskStatusUpdateStep", calls)

    async def _update_status(context, status):
        calls.append(f"status:{status.value}")
        contexts.append(context)
        context.task = replace(context.task, status=status)
        return context

    status_step.update_status = AsyncMock(side_effect=_update_status)

    transfer_step = _step("AssetTransferStep", calls)

    async def _transfer(context):
        calls.append("transfer")
        context.asset.data_source_id = "ds-1"
        return context

    transfer_step.transfer_asset_to_annotation = AsyncMock(side_effect=_transfer)

    management_step = _step("TaskManagementStep", calls)

    async def _rework(context):
        calls.append("rework")
        context.next_task = make_task("t1", TaskStatus.CHANGES_REQUIRED)
        return context

    management_step.update_annotation_task_for_changes = AsyncMock(side_effect=_rework)

    pipeline = TaskVetoPipeline(
        task_repo,
        asset_repo,
        stage_repo,
        status_step,
        transfer_step,
        management_step,
        alert_service,
    )
    return {
        "pipeline": pipeline,
        "calls": calls,
        "contexts": contexts,
        "task_repo": task_repo,
        "stage_repo": stage_repo,
        "management_step": management_step,
        "alert_service": alert_service,
    }


async def test_veto_routes_asset_back_for_rework(veto_mocks) -> None:
    """Happy path: VETOED, asset back to annotation, annotation task CHANGES_REQUIRED."""
    m = veto_mocks

    result = await m["pipeline"].execute("t2", "user123", "bounding boxes misaligned")

    assert result.is_success
    assert result.updated_task.status == TaskStatus.VETOED
    assert result.created_task.id == "t1"
    assert result.created_task.status == TaskStatus.CHANGES_REQUIRED
    assert m["calls"] == ["status:VETOED", "transfer", "rework"]
    assert m["contexts"][0].reason == "bounding boxes misaligned"


async def test_annotation_task_cannot_be_vetoed(veto_mocks) -> None:
    m = veto_mocks
    m["task_repo"].get_by_id.return_value = make_task()
    m["stage_repo"].get_by_id.return_value = make_stage()

    result = await m["pipeline"].execute("t1", "user123")

    assert not result.is_success
    assert result.error_message == "Annotation tasks cannot be vetoed"
    assert result.error_code == "INVALID_OPERATION"
    assert m["calls"] == []


async def test_already_vetoed_task_is_rejected(veto_mocks) -> None:
    m = veto_mocks
    m["task_repo"].get_by_id.return_value = make_task(
        "t2", TaskStatus.VETOED, stage_id="stage-review"
    )

    result = await m["pipeline"].execute("t2", "user123")

    assert result.error_message == "Task has already been vetoed"
    assert result.error_code == "INVALID_STATE"
    assert m["calls"] == []


@pytest.mark.parametrize(
    "status",
    [TaskStatus.NOT_STARTED, TaskStatus.READY_FOR_REVIEW, TaskStatus.COMPLETED],
)
async def test_only_in_progress_tasks_can_be_vetoed(veto_mocks, status) -> None:
    m = veto_mocks
    m["task_repo"].get_by_id.return_value = make_task("t2", status, stage_id="stage-review")

    result = await m["pipeline"].execute("t2", "user123")

    assert not result.is_success
    assert "cannot be vetoed" in result.error_message
    assert m["calls"] == []


async def test_veto_by_other_user_is_denied(veto_mocks) -> None:
    m = veto_mocks

    result = await m["pipeline"].execute("t2", "someone-else")

    assert result.error_code == "PERMISSION_DENIED"
    assert result.error_message == "Permission denied: veto on task"
    assert m["calls"] == []


async def test_missing_task_is_reported(veto_mocks) -> None:
    m = veto_mocks
    m["task_repo"].get_by_id.return_value = None

    result = await m["pipeline"].execute("nope", "user123")

    assert result.error_message == "Task not found with ID: nope"


async def test_integrity_violation_is_returned_verbatim_after_rollback(veto_mocks) -> None:
    """A live annotation task aborts the veto; transfer and status are undone in reverse."""
    m = veto_mocks
    m["management_step"].update_annotation_task_for_changes.side_effect = (
        DataIntegrityException(INTEGRITY_MESSAGE, task_id="t1", asset_id="a1")
    )

    result = await m["pipeline"].execute("t2", "user123")

    assert not result.is_success
    assert result.error_message == INTEGRITY_MESSAGE
    assert result.error_code == "DATA_INTEGRITY_VIOLATION"
    assert result.rollback_errors == []
    assert m["calls"] == [
        "status:VETOED",
        "transfer",
        "rollback:AssetTransferStep",
        "rollback:TaskStatusUpdateStep",
    ]
    m["management_step"].rollback.assert_not_awaited()


async def test_can_execute_requires_assignment(veto_mocks) -> None:
    pipeline = veto_mocks["pipeline"]

    assert await pipeline.can_execute("t2", "user123") is True
    assert await pipeline.can_execute("t2", "someone-else") is False
