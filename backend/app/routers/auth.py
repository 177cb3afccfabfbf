"""
Authentication router: login and current-user lookup.
"""

from fastapi import APIRouter, Depends, HTTPException

from app.dependencies import get_current_profile, get_repo
from app.models.profile import AuthIdentity, Profile
from app.schemas.profile import LoginRequest, LoginResponse, ProfileResponse
from app.services.auth import create_access_token, verify_password
from app.services.repository import SqlRepository

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post("/login", response_model=LoginResponse)
def login(body: LoginRequest, repo: SqlRepository = Depends(get_repo)):
    email = body.email.strip().lower()
    identities = repo.select(AuthIdentity, {"email": email})
    identity = identities[0] if identities else None

    if not identity or not verify_password(body.password, identity.password_hash):
        raise HTTPException(status_code=401, detail="Invalid email or password")

    profile = repo.get(Profile, identity.id)
    if not profile:
        raise HTTPException(status_code=403, detail="Account has no profile")

    return LoginResponse(
        access_token=create_access_token(str(profile.id)),
        user=ProfileResponse.model_validate(profile),
    )


@router.get("/me", response_model=ProfileResponse)
def me(profile: Profile = Depends(get_current_profile)):
    return profile
