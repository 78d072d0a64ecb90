"""Task API controller with FastAPI endpoints."""

import logging
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Path

from models.user import User
from sacredsix.core.dependencies import get_collaboration_engine, get_current_user, validate_token
from sacredsix.domains.collaboration.engine import CollaborationEngine
from sacredsix.domains.goal.link_registry import GoalLinkRegistry
from sacredsix.domains.task.service import TaskService
from sacredsix.schemas.base import ResponseSchema
from sacredsix.schemas.goal import GoalLinkRequest
from sacredsix.schemas.task import TaskCreate, TaskResponse, TaskUpdate, TodaySelection

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/tasks",
    tags=["tasks"],
    dependencies=[Depends(validate_token)],
)


def _task_data(task) -> dict:
    return TaskResponse.model_validate(task).model_dump(mode="json")


def _task_list(tasks) -> dict:
    return {"tasks": [_task_data(task) for task in tasks], "total": len(tasks)}


@router.post("/", response_model=ResponseSchema, status_code=201)
async def create_task(
    task_data: TaskCreate,
    current_user: User = Depends(get_current_user),
    engine: CollaborationEngine = Depends(get_collaboration_engine),
):
    """Create a new task in a project the user can edit."""
    service = TaskService(engine.store, engine)
    task = await service.create_task(task_data, current_user.id)

    return ResponseSchema(
        status="success",
        message="Task created successfully",
        data=_task_data(task),
    )


@router.get("/today", response_model=ResponseSchema)
async def get_today_tasks(
    current_user: User = Depends(get_current_user),
    engine: CollaborationEngine = Depends(get_collaboration_engine),
):
    service = TaskService(engine.store, engine)
    tasks = await service.list_today(current_user.id)

    return ResponseSchema(
        status="success",
        message="Today's tasks retrieved successfully",
        data=_task_list(tasks),
    )


@router.put("/today/select", response_model=ResponseSchema)
async def select_today_tasks(
    selection: TodaySelection,
    current_user: User = Depends(get_current_user),
    engine: CollaborationEngine = Depends(get_collaboration_engine),
):
    """Replace the user's today-selection (up to six tasks)."""
    service = TaskService(engine.store, engine)
    tasks = await service.select_for_today(current_user.id, selection.task_ids)

    return ResponseSchema(
        status="success",
        message="Today's tasks selected successfully",
        data=_task_list(tasks),
    )


@router.get("/project/{project_id}", response_model=ResponseSchema)
async def get_project_tasks(
    project_id: UUID = Path(..., description="Project ID"),
    current_user: User = Depends(get_current_user),
    engine: CollaborationEngine = Depends(get_collaboration_engine),
):
    """Get all tasks for a specific project."""
    service = TaskService(engine.store, engine)
    tasks = await service.list_project_tasks(project_id, current_user.id)

    return ResponseSchema(
        status="success",
        message="Project tasks retrieved successfully",
        data=_task_list(tasks),
    )


@router.get("/{task_id}", response_model=ResponseSchema)
async def get_task(
    task_id: UUID = Path(..., description="Task ID"),
    current_user: User = Depends(get_current_user),
    engine: CollaborationEngine = Depends(get_collaboration_engine),
):
    service = TaskService(engine.store, engine)
    task = await service.get_task(task_id, current_user.id)

    return ResponseSchema(
        status="success",
        message="Task retrieved successfully",
        data=_task_data(task),
    )


@router.put("/{task_id}", response_model=ResponseSchema)
async def update_task(
    task_id: UUID = Path(..., description="Task ID"),
    task_data: TaskUpdate = Body(...),
    current_user: User = Depends(get_current_user),
    engine: CollaborationEngine = Depends(get_collaboration_engine),
):
    """Update a specific task."""
    service = TaskService(engine.store, engine)
    task = await service.update_task(task_id, task_data, current_user.id)

    return ResponseSchema(
        status="success",
        message="Task updated successfully",
        data=_task_data(task),
    )


@router.put("/{task_id}/goal", response_model=ResponseSchema)
async def link_task_goal(
    link: GoalLinkRequest,
    task_id: UUID = Path(..., description="Task ID"),
    current_user: User = Depends(get_current_user),
    engine: CollaborationEngine = Depends(get_collaboration_engine),
):
    """Link the task to a goal of its project, or unlink it."""
    registry = GoalLinkRegistry(engine.store, engine)
    task = await registry.link_task_to_goal(task_id, link.goal_id, current_user.id)

    return ResponseSchema(
        status="success",
        message="Task linked to goal" if task.goal_id else "Task unlinked from goal",
        data=_task_data(task),
    )


@router.delete("/{task_id}", response_model=ResponseSchema)
async def delete_task(
    task_id: UUID = Path(..., description="Task ID"),
    current_user: User = Depends(get_current_user),
    engine: CollaborationEngine = Depends(get_collaboration_engine),
):
    service = TaskService(engine.store, engine)
    await service.delete_task(task_id, current_user.id)

    return ResponseSchema(status="success", message="Task deleted successfully", data=None)
