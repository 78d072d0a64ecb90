"""Goal API controller with FastAPI endpoints."""

import logging
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Path

from models.user import User
from sacredsix.core.dependencies import get_collaboration_engine, get_current_user, validate_token
from sacredsix.domains.collaboration.engine import CollaborationEngine
from sacredsix.domains.goal.service import GoalService
from sacredsix.schemas.base import ResponseSchema
from sacredsix.schemas.goal import (
    GoalCreate,
    GoalRelinkRequest,
    GoalResponse,
    GoalUpdate,
    RelinkResponse,
    SkippedTask,
)
from sacredsix.schemas.task import TaskResponse

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/goals",
    tags=["goals"],
    dependencies=[Depends(validate_token)],
)


def _goal_data(goal) -> dict:
    return GoalResponse.model_validate(goal).model_dump(mode="json")


@router.post("/", response_model=ResponseSchema, status_code=201)
async def create_goal(
    goal_data: GoalCreate,
    current_user: User = Depends(get_current_user),
    engine: CollaborationEngine = Depends(get_collaboration_engine),
):
    service = GoalService(engine.store, engine)
    goal = await service.create_goal(goal_data, current_user.id)

    return ResponseSchema(status="success", message="Goal created successfully", data=_goal_data(goal))


@router.get("/project/{project_id}", response_model=ResponseSchema)
async def get_project_goals(
    project_id: UUID = Path(..., description="Project ID"),
    current_user: User = Depends(get_current_user),
    engine: CollaborationEngine = Depends(get_collaboration_engine),
):
    """Get the goals of a project with progress derived from linked tasks."""
    service = GoalService(engine.store, engine)
    goals = await service.list_project_goals(project_id, current_user.id)

    return ResponseSchema(
        status="success",
        message="Goals retrieved successfully",
        data={"goals": [_goal_data(goal) for goal in goals], "total": len(goals)},
    )


@router.get("/{goal_id}", response_model=ResponseSchema)
async def get_goal(
    goal_id: UUID = Path(..., description="Goal ID"),
    current_user: User = Depends(get_current_user),
    engine: CollaborationEngine = Depends(get_collaboration_engine),
):
    service = GoalService(engine.store, engine)
    goal = await service.get_goal(goal_id, current_user.id)

    return ResponseSchema(status="success", message="Goal retrieved successfully", data=_goal_data(goal))


@router.get("/{goal_id}/tasks", response_model=ResponseSchema)
async def get_goal_tasks(
    goal_id: UUID = Path(..., description="Goal ID"),
    current_user: User = Depends(get_current_user),
    engine: CollaborationEngine = Depends(get_collaboration_engine),
):
    service = GoalService(engine.store, engine)
    tasks = await service.list_goal_tasks(goal_id, current_user.id)

    return ResponseSchema(
        status="success",
        message="Goal tasks retrieved successfully",
        data={
            "tasks": [TaskResponse.model_validate(task).model_dump(mode="json") for task in tasks],
            "total": len(tasks),
        },
    )


@router.put("/{goal_id}", response_model=ResponseSchema)
async def update_goal(
    goal_id: UUID = Path(..., description="Goal ID"),
    goal_data: GoalUpdate = Body(...),
    current_user: User = Depends(get_current_user),
    engine: CollaborationEngine = Depends(get_collaboration_engine),
):
    service = GoalService(engine.store, engine)
    goal = await service.update_goal(goal_id, goal_data, current_user.id)

    return ResponseSchema(status="success", message="Goal updated successfully", data=_goal_data(goal))


@router.put("/{goal_id}/tasks", response_model=ResponseSchema)
async def relink_goal_tasks(
    relink: GoalRelinkRequest,
    goal_id: UUID = Path(..., description="Goal ID"),
    current_user: User = Depends(get_current_user),
    engine: CollaborationEngine = Depends(get_collaboration_engine),
):
    """Set the tasks linked to a goal in one step."""
    service = GoalService(engine.store, engine)
    result = await service.relink_tasks(goal_id, relink.task_ids, current_user.id)

    response = RelinkResponse(
        linked=result.linked,
        unlinked=result.unlinked,
        unchanged=result.unchanged,
        skipped=[SkippedTask(task_id=task_id, reason=reason) for task_id, reason in result.skipped],
    )
    return ResponseSchema(
        status="success",
        message="Goal tasks updated successfully",
        data=response.model_dump(mode="json"),
    )


@router.delete("/{goal_id}", response_model=ResponseSchema)
async def delete_goal(
    goal_id: UUID = Path(..., description="Goal ID"),
    current_user: User = Depends(get_current_user),
    engine: CollaborationEngine = Depends(get_collaboration_engine),
):
    """Delete a goal; its tasks stay and lose the link."""
    service = GoalService(engine.store, engine)
    unlinked = await service.delete_goal(goal_id, current_user.id)

    return ResponseSchema(
        status="success",
        message="Goal deleted successfully",
        data={"tasks_unlinked": unlinked},
    )
