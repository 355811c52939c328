"""Tests for TaskStatusService routing and direct transitions."""

from unittest.mock import AsyncMock

import pytest

from annoflow.application.services import TaskStatusValidator
from annoflow.application.use_cases.tasks import TaskStatusService
from annoflow.application.workflow import PipelineResult
from annoflow.domain.enums import TaskStatus
from tests.factories import make_task
from tests.fakes import InMemoryTaskRepository


@pytest.fixture
def status_service():
    """Service over an in-memory repo holding t1 (IN_PROGRESS, user123) and an unassigned t2."""
    repo = InMemoryTaskRepository([
        make_task(),
        make_task("t2", TaskStatus.READY_FOR_REVIEW, stage_id="stage-review", assigned_to=None),
    ])
    completion = AsyncMock()
    veto = AsyncMock()
    service = TaskStatusService(repo, TaskStatusValidator(), completion, veto)
    return service, repo, completion, veto


async def test_completed_is_routed_to_completion_pipeline(status_service) -> None:
    service, repo, completion, veto = status_service
    expected = PipelineResult.success(make_task(status=TaskStatus.COMPLETED))
    completion.execute.return_value = expected

    result = await service.change_status("t1", TaskStatus.COMPLETED, "user123")

    assert result is expected
    completion.execute.assert_awaited_once_with("t1", "user123", cancel_event=None)
    veto.execute.assert_not_awaited()


async def test_vetoed_is_routed_to_veto_pipeline_with_reason(status_service) -> None:
    service, repo, completion, veto = status_service

    await service.change_status("t2", TaskStatus.VETOED, "user123", "blurry")

    veto.execute.assert_awaited_once_with("t2", "user123", "blurry", cancel_event=None)
    completion.execute.assert_not_awaited()


async def test_suspend_is_a_direct_status_write(status_service) -> None:
    service, repo, completion, veto = status_service

    result = await service.change_status("t1", TaskStatus.SUSPENDED, "user123")

    assert result.is_success
    assert result.created_task is None
    assert result.updated_task.status == TaskStatus.SUSPENDED
    assert repo.tasks["t1"].suspended_at is not None
    assert repo.tasks["t1"].assigned_to_user_id == "user123"


async def test_unassigned_task_can_be_started_by_anyone(status_service) -> None:
    service, repo, completion, veto = status_service

    result = await service.change_status("t2", TaskStatus.IN_PROGRESS, "reviewer-9")

    assert result.is_success
    assert repo.tasks["t2"].status == TaskStatus.IN_PROGRESS
    assert repo.tasks["t2"].last_worked_on_by_user_id == "reviewer-9"
    assert repo.tasks["t2"].assigned_to_user_id == "reviewer-9"


async def test_task_of_other_user_cannot_be_changed(status_service) -> None:
    service, repo, completion, veto = status_service

    result = await service.change_status("t1", TaskStatus.DEFERRED, "someone-else")

    assert not result.is_success
    assert result.error_code == "PERMISSION_DENIED"
    assert repo.tasks["t1"].status == TaskStatus.IN_PROGRESS


async def test_invalid_transition_is_rejected(status_service) -> None:
    service, repo, completion, veto = status_service

    result = await service.change_status("t1", TaskStatus.ARCHIVED, "user123")

    assert not result.is_success
    assert result.error_code == "INVALID_STATE"
    assert result.error_message == "Invalid status transition for task t1: IN_PROGRESS -> ARCHIVED"


async def test_missing_task(status_service) -> None:
    service, repo, completion, veto = status_service

    result = await service.change_status("nope", TaskStatus.SUSPENDED, "user123")

    assert result.error_message == "Task not found with ID: nope"
    assert result.error_code == "RESOURCE_NOT_FOUND"
