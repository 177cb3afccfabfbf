import uuid

from fastapi import APIRouter, Depends, Query

from app.dependencies import get_actor, get_repo
from app.schemas.project import ProjectCreate, ProjectUpdate, ProjectResponse
from app.services import projects as project_service
from app.services.lifecycle import Actor
from app.services.repository import SqlRepository

router = APIRouter(prefix="/api/v1/projects", tags=["Projects"])


@router.get("/", response_model=list[ProjectResponse])
def list_projects(
    include_inactive: bool = Query(False),
    actor: Actor = Depends(get_actor),
    repo: SqlRepository = Depends(get_repo),
):
    """Active projects by name; admins may ask for inactive ones too."""
    return project_service.list_projects(repo, actor, include_inactive=include_inactive)


@router.post("/", response_model=ProjectResponse, status_code=201)
def create_project(
    body: ProjectCreate,
    actor: Actor = Depends(get_actor),
    repo: SqlRepository = Depends(get_repo),
):
    return project_service.create_project(
        repo, actor, name=body.name, description=body.description, status=body.status
    )


@router.put("/{project_id}", response_model=ProjectResponse)
def update_project(
    project_id: uuid.UUID,
    body: ProjectUpdate,
    actor: Actor = Depends(get_actor),
    repo: SqlRepository = Depends(get_repo),
):
    return project_service.update_project(repo, actor, project_id, body.model_dump(exclude_unset=True))


@router.delete("/{project_id}")
def delete_project(
    project_id: uuid.UUID,
    actor: Actor = Depends(get_actor),
    repo: SqlRepository = Depends(get_repo),
):
    project_service.delete_project(repo, actor, project_id)
    return {"ok": True}
