"""Entity builders shared by unit tests."""

from annoflow.application.workflow.context import PipelineContext
from annoflow.domain.entities import (
    AssetEntity,
    DataSourceEntity,
    TaskEntity,
    WorkflowStageEntity,
)
from annoflow.domain.enums import DataSourceType, TaskStatus, WorkflowStageType


def make_task(
    task_id: str = "t1",
    status: TaskStatus = TaskStatus.IN_PROGRESS,
    stage_id: str = "stage-annotation",
    assigned_to: str | None = "user123",
    asset_id: str = "a1",
) -> TaskEntity:
    return TaskEntity(
        id=task_id,
        asset_id=asset_id,
        project_id="p1",
        workflow_id="wf1",
        workflow_stage_id=stage_id,
        status=status,
        assigned_to_user_id=assigned_to,
    )


def make_asset(data_source_id: str = "ds-1") -> AssetEntity:
    return AssetEntity(id="a1", project_id="p1", data_source_id=data_source_id, filename="image.png")


def make_stage(
    stage_id: str = "stage-annotation",
    stage_type: WorkflowStageType = WorkflowStageType.ANNOTATION,
    data_source_id: str | None = "ds-1",
    order: int = 1,
) -> WorkflowStageEntity:
    return WorkflowStageEntity(
        id=stage_id,
        workflow_id="wf1",
        name=stage_id,
        stage_type=stage_type,
        stage_order=order,
        target_data_source_id=data_source_id,
    )


def make_data_source(
    source_id: str = "ds-1", name: str = "Annotation", is_default: bool = False
) -> DataSourceEntity:
    return DataSourceEntity(
        id=source_id,
        project_id="p1",
        name=name,
        source_type=DataSourceType.MINIO_BUCKET,
        storage_prefix=f"projects/p1/{source_id}",
        is_default=is_default,
    )


def make_context(
    task: TaskEntity | None = None,
    current_stage: WorkflowStageEntity | None = None,
    target_stage: WorkflowStageEntity | None = None,
    user_id: str = "user123",
) -> PipelineContext:
    context = PipelineContext(
        task=task or make_task(),
        asset=make_asset(),
        current_stage=current_stage or make_stage(),
        user_id=user_id,
    )
    if target_stage is not None:
        context = context.with_target_stage(target_stage)
    return context
