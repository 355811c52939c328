"""Tests for domain entities and enums."""

import pytest

from annoflow.domain.entities import WorkflowStageConnectionEntity
from annoflow.domain.enums import ACTIVE_TASK_STATUSES, TaskStatus, WorkflowStageType
from tests.factories import make_asset, make_data_source, make_stage, make_task


def test_task_status_values() -> None:
    values = TaskStatus.values()
    assert "IN_PROGRESS" in values
    assert "CHANGES_REQUIRED" in values
    assert len(values) == 11


def test_active_statuses() -> None:
    assert TaskStatus.NOT_STARTED.is_active
    assert TaskStatus.READY_FOR_REVIEW.is_active
    for status in (TaskStatus.COMPLETED, TaskStatus.VETOED, TaskStatus.ARCHIVED):
        assert not status.is_active
        assert status not in ACTIVE_TASK_STATUSES


def test_is_assigned_to() -> None:
    assert make_task(assigned_to="user123").is_assigned_to("user123")
    assert not make_task(assigned_to="user123").is_assigned_to("other")
    assert not make_task(assigned_to=None).is_assigned_to("user123")


@pytest.mark.parametrize(
    ("status", "stamped"),
    [
        (TaskStatus.COMPLETED, "completed_at"),
        (TaskStatus.VETOED, "vetoed_at"),
        (TaskStatus.SUSPENDED, "suspended_at"),
        (TaskStatus.DEFERRED, "deferred_at"),
        (TaskStatus.CHANGES_REQUIRED, "changes_required_at"),
    ],
)
def test_apply_status_change_stamps_matching_timestamp(status, stamped) -> None:
    task = make_task()

    task.apply_status_change(status, "user123")

    assert task.status == status
    assert getattr(task, stamped) is not None
    assert task.updated_at == getattr(task, stamped)
    assert task.last_worked_on_by_user_id == "user123"


def test_archiving_also_marks_completed() -> None:
    task = make_task(status=TaskStatus.COMPLETED)

    task.apply_status_change(TaskStatus.ARCHIVED, "user123")

    assert task.archived_at is not None
    assert task.completed_at == task.archived_at


def test_apply_status_change_requires_user() -> None:
    with pytest.raises(ValueError, match="user_id is required"):
        make_task().apply_status_change(TaskStatus.COMPLETED, "")


def test_in_progress_does_not_stamp_timestamps() -> None:
    task = make_task(status=TaskStatus.NOT_STARTED)

    task.apply_status_change(TaskStatus.IN_PROGRESS, "user123")

    assert task.completed_at is None
    assert task.vetoed_at is None
    assert task.updated_at is not None


def test_asset_data_source_membership() -> None:
    asset = make_asset("ds-1")
    assert asset.is_in_data_source("ds-1")
    assert not asset.is_in_data_source("ds-2")


def test_data_source_object_ref_joins_prefix_and_filename() -> None:
    source = make_data_source("ds-1")
    assert source.object_ref("image.png") == "projects/p1/ds-1/image.png"
    source.storage_prefix = "projects/p1/ds-1/"
    assert source.object_ref("image.png") == "projects/p1/ds-1/image.png"


def test_stage_storage_ownership() -> None:
    assert make_stage().owns_storage()
    assert not make_stage("done", WorkflowStageType.COMPLETION, None).owns_storage()


def test_connection_without_condition_is_default() -> None:
    assert WorkflowStageConnectionEntity(id="c1", from_stage_id="a", to_stage_id="b").is_default
    conditional = WorkflowStageConnectionEntity(
        id="c2", from_stage_id="a", to_stage_id="c", condition="rejected"
    )
    assert not conditional.is_default
