"""
User management router (admin only).
"""

import uuid

from fastapi import APIRouter, Depends

from app.dependencies import get_repo, require_admin
from app.schemas.profile import ProfileCreate, ProfileUpdate, ProfileResponse
from app.services import users as user_service
from app.services.lifecycle import Actor
from app.services.repository import SqlRepository

router = APIRouter(prefix="/api/v1/users", tags=["User Management"])


@router.get("/", response_model=list[ProfileResponse])
def list_users(
    actor: Actor = Depends(require_admin),
    repo: SqlRepository = Depends(get_repo),
):
    return user_service.list_users(repo, actor)


@router.get("/managers", response_model=list[ProfileResponse])
def list_managers(
    actor: Actor = Depends(require_admin),
    repo: SqlRepository = Depends(get_repo),
):
    """Candidates for an employee's manager_id."""
    return user_service.list_managers(repo, actor)


@router.post("/", response_model=ProfileResponse, status_code=201)
def create_user(
    body: ProfileCreate,
    actor: Actor = Depends(require_admin),
    repo: SqlRepository = Depends(get_repo),
):
    return user_service.create_user(
        repo, actor,
        email=body.email,
        password=body.password,
        full_name=body.full_name,
        role=body.role,
        manager_id=body.manager_id,
    )


@router.put("/{user_id}", response_model=ProfileResponse)
def update_user(
    user_id: uuid.UUID,
    body: ProfileUpdate,
    actor: Actor = Depends(require_admin),
    repo: SqlRepository = Depends(get_repo),
):
    return user_service.update_user(repo, actor, user_id, body.model_dump(exclude_unset=True))


@router.delete("/{user_id}")
def delete_user(
    user_id: uuid.UUID,
    actor: Actor = Depends(require_admin),
    repo: SqlRepository = Depends(get_repo),
):
    user_service.delete_user(repo, actor, user_id)
    return {"ok": True}
