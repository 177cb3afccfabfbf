"""
Authentication and authorization dependencies.

Supports signed bearer tokens (production) with a demo-header fallback when
AUTH_MODE=demo: the X-User-Id header names an existing profile directly.
"""

import os
import uuid
from fastapi import HTTPException, Header, Depends
from sqlalchemy.orm import Session
from typing import Optional

from app.database import get_db
from app.models.profile import Profile, Role
from app.services.auth import decode_access_token
from app.services.lifecycle import Actor
from app.services.repository import SqlRepository

AUTH_MODE = os.getenv("AUTH_MODE", "demo")  # "demo" or "token"


def _as_uuid(value) -> uuid.UUID:
    if value is None:
        raise ValueError("None is not a UUID")
    if isinstance(value, uuid.UUID):
        return value
    return uuid.UUID(str(value))


def get_repo(db: Session = Depends(get_db)) -> SqlRepository:
    return SqlRepository(db)


def get_current_profile(
    authorization: Optional[str] = Header(default=None),
    x_user_id: Optional[str] = Header(default=None),
    db: Session = Depends(get_db),
) -> Profile:
    """Resolve the calling profile from a Bearer token, or X-User-Id in demo mode."""
    if authorization:
        token = authorization.removeprefix("Bearer ").strip()
        payload = decode_access_token(token) if token else None
        if not payload:
            raise HTTPException(status_code=401, detail="Invalid or expired token")
        subject = payload.get("sub")
    elif AUTH_MODE == "demo" and x_user_id:
        subject = x_user_id
    else:
        raise HTTPException(status_code=401, detail="Not authenticated")

    try:
        profile_id = _as_uuid(subject)
    except ValueError:
        raise HTTPException(status_code=401, detail="Invalid user id")

    profile = db.get(Profile, profile_id)
    if not profile:
        raise HTTPException(status_code=401, detail="User not found")
    return profile


def get_actor(profile: Profile = Depends(get_current_profile)) -> Actor:
    return Actor.from_profile(profile)


def require_manager(actor: Actor = Depends(get_actor)) -> Actor:
    """Require the manager role. Admins are not reviewers."""
    if actor.role is not Role.manager:
        raise HTTPException(status_code=403, detail="Manager access required")
    return actor


def require_admin(actor: Actor = Depends(get_actor)) -> Actor:
    if actor.role is not Role.admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return actor
