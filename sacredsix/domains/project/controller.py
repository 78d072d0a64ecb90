"""Project API controller with FastAPI endpoints."""

import logging
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Path, Query

from models.enums import ProjectRole
from models.user import User
from sacredsix.core.dependencies import get_collaboration_engine, get_current_user, validate_token
from sacredsix.domains.collaboration.engine import CollaborationEngine
from sacredsix.domains.project.service import ProjectService
from sacredsix.schemas.base import ResponseSchema
from sacredsix.schemas.project import (
    ArchiveToggle,
    ProjectCreate,
    ProjectReorder,
    ProjectResponse,
    ProjectUpdate,
    RecurringSettings,
    SacredToggle,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/projects",
    tags=["projects"],
    dependencies=[Depends(validate_token)],
)


def _project_data(project, role: ProjectRole | None = None) -> dict:
    response = ProjectResponse.model_validate(project)
    if role is not None:
        response.role = role.value
    return response.model_dump(mode="json")


def _project_list(projects) -> dict:
    return {"projects": [_project_data(project) for project in projects], "total": len(projects)}


@router.post("/", response_model=ResponseSchema, status_code=201)
async def create_project(
    project_data: ProjectCreate,
    current_user: User = Depends(get_current_user),
    engine: CollaborationEngine = Depends(get_collaboration_engine),
):
    """Create a new project."""
    service = ProjectService(engine.store, engine)
    project = await service.create_project(project_data=project_data, user_id=current_user.id)

    return ResponseSchema(
        status="success",
        message="Project created successfully",
        data=_project_data(project, ProjectRole.owner),
    )


@router.get("/", response_model=ResponseSchema)
async def get_projects(
    scope: str = Query("all", pattern="^(all|owned|shared)$"),
    include_archived: bool = Query(False),
    current_user: User = Depends(get_current_user),
    engine: CollaborationEngine = Depends(get_collaboration_engine),
):
    """List projects the user owns or collaborates on, in sort order."""
    service = ProjectService(engine.store, engine)
    projects = await service.list_projects(
        current_user.id, include_archived=include_archived, scope=scope
    )

    return ResponseSchema(
        status="success",
        message="Projects retrieved successfully",
        data=_project_list(projects),
    )


@router.get("/archived", response_model=ResponseSchema)
async def get_archived_projects(
    current_user: User = Depends(get_current_user),
    engine: CollaborationEngine = Depends(get_collaboration_engine),
):
    service = ProjectService(engine.store, engine)
    projects = await service.list_projects(current_user.id, archived_only=True)

    return ResponseSchema(
        status="success",
        message="Archived projects retrieved successfully",
        data=_project_list(projects),
    )


@router.get("/sacred", response_model=ResponseSchema)
async def get_sacred_projects(
    current_user: User = Depends(get_current_user),
    engine: CollaborationEngine = Depends(get_collaboration_engine),
):
    """Get the current user's sacred, non-archived projects."""
    service = ProjectService(engine.store, engine)
    projects = await service.list_sacred(current_user.id)

    return ResponseSchema(
        status="success",
        message="Sacred projects retrieved successfully",
        data=_project_list(projects),
    )


@router.put("/reorder", response_model=ResponseSchema)
async def reorder_projects(
    reorder: ProjectReorder,
    current_user: User = Depends(get_current_user),
    engine: CollaborationEngine = Depends(get_collaboration_engine),
):
    service = ProjectService(engine.store, engine)
    projects = await service.reorder_projects(current_user.id, reorder.project_ids)

    return ResponseSchema(
        status="success",
        message="Projects reordered successfully",
        data=_project_list(projects),
    )


@router.get("/{project_id}", response_model=ResponseSchema)
async def get_project(
    project_id: UUID = Path(..., description="Project ID"),
    current_user: User = Depends(get_current_user),
    engine: CollaborationEngine = Depends(get_collaboration_engine),
):
    """Get a specific project by ID."""
    service = ProjectService(engine.store, engine)
    project, role = await service.get_project(project_id, current_user.id)

    return ResponseSchema(
        status="success",
        message="Project retrieved successfully",
        data=_project_data(project, role),
    )


@router.put("/{project_id}", response_model=ResponseSchema)
async def update_project(
    project_id: UUID = Path(..., description="Project ID"),
    project_data: ProjectUpdate = Body(...),
    current_user: User = Depends(get_current_user),
    engine: CollaborationEngine = Depends(get_collaboration_engine),
):
    """Update a specific project."""
    service = ProjectService(engine.store, engine)
    project = await service.update_project(project_id, project_data, current_user.id)

    return ResponseSchema(
        status="success",
        message="Project updated successfully",
        data=_project_data(project),
    )


@router.put("/{project_id}/sacred", response_model=ResponseSchema)
async def set_sacred(
    toggle: SacredToggle,
    project_id: UUID = Path(..., description="Project ID"),
    current_user: User = Depends(get_current_user),
    engine: CollaborationEngine = Depends(get_collaboration_engine),
):
    """Mark or unmark a project as sacred."""
    service = ProjectService(engine.store, engine)
    project = await service.set_sacred(project_id, current_user.id, toggle.is_sacred)

    return ResponseSchema(
        status="success",
        message="Project marked as sacred" if project.is_sacred else "Project unmarked as sacred",
        data=_project_data(project),
    )


@router.get("/{project_id}/sacred/availability", response_model=ResponseSchema)
async def get_sacred_availability(
    project_id: UUID = Path(..., description="Project ID"),
    current_user: User = Depends(get_current_user),
    engine: CollaborationEngine = Depends(get_collaboration_engine),
):
    service = ProjectService(engine.store, engine)
    allowed = await service.guard.can_mark_sacred(current_user.id, project_id)

    return ResponseSchema(
        status="success",
        message="Sacred availability retrieved successfully",
        data={"can_mark_sacred": allowed},
    )


@router.put("/{project_id}/archive", response_model=ResponseSchema)
async def set_archived(
    toggle: ArchiveToggle,
    project_id: UUID = Path(..., description="Project ID"),
    current_user: User = Depends(get_current_user),
    engine: CollaborationEngine = Depends(get_collaboration_engine),
):
    service = ProjectService(engine.store, engine)
    project = await service.set_archived(project_id, current_user.id, toggle.is_archived)

    return ResponseSchema(
        status="success",
        message="Project archived" if project.is_archived else "Project restored",
        data=_project_data(project),
    )


@router.put("/{project_id}/recurring-settings", response_model=ResponseSchema)
async def update_recurring_settings(
    recurring: RecurringSettings,
    project_id: UUID = Path(..., description="Project ID"),
    current_user: User = Depends(get_current_user),
    engine: CollaborationEngine = Depends(get_collaboration_engine),
):
    """Set the recurrence defaults applied to new tasks of the project."""
    service = ProjectService(engine.store, engine)
    project = await service.update_recurring_settings(project_id, current_user.id, recurring)

    return ResponseSchema(
        status="success",
        message="Recurring settings updated successfully",
        data=_project_data(project),
    )


@router.delete("/{project_id}", response_model=ResponseSchema)
async def delete_project(
    project_id: UUID = Path(..., description="Project ID"),
    current_user: User = Depends(get_current_user),
    engine: CollaborationEngine = Depends(get_collaboration_engine),
):
    """Delete a project and everything that belongs to it."""
    service = ProjectService(engine.store, engine)
    success = await service.delete_project(project_id, current_user.id)

    return ResponseSchema(
        status="success" if success else "error",
        message="Project deleted successfully" if success else "Failed to delete project",
        data=None,
    )
