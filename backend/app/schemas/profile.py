from pydantic import BaseModel
from typing import Optional
from datetime import datetime
from uuid import UUID

from app.models.profile import Role


class ProfileCreate(BaseModel):
    email: str
    password: str
    full_name: str
    role: Role = Role.employee
    manager_id: Optional[UUID] = None


class ProfileUpdate(BaseModel):
    full_name: Optional[str] = None
    role: Optional[Role] = None
    manager_id: Optional[UUID] = None


class ProfileResponse(BaseModel):
    id: UUID
    email: str
    full_name: str
    role: Role
    manager_id: Optional[UUID] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class LoginRequest(BaseModel):
    email: str
    password: str


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: ProfileResponse
