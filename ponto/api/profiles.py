"""
Profile API routes.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ponto.database import get_db
from ponto.schemas.profile import ProfileCreate, ProfileNameUpdate, ProfileRoleUpdate, ProfileResponse
from ponto.services.profile_service import ProfileService
from ponto.utils.auth import Actor, get_current_actor, get_current_reviewer

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.post("/", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED, summary="Create a user")
async def create_profile(
    data: ProfileCreate,
    actor: Actor = Depends(get_current_reviewer),
    db: Session = Depends(get_db)
):
    """gestor/admin only; only an admin may create another admin"""
    return ProfileResponse.model_validate(ProfileService(db).create_profile(actor, data))


@router.get("/me", response_model=ProfileResponse, summary="Current user's profile")
async def get_my_profile(
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db)
):
    return ProfileResponse.model_validate(ProfileService(db).get_profile(actor.id))


@router.patch("/me", response_model=ProfileResponse, summary="Update own name")
async def update_my_profile(
    data: ProfileNameUpdate,
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db)
):
    return ProfileResponse.model_validate(ProfileService(db).update_name(actor, data))


@router.patch("/{profile_id}/role", response_model=ProfileResponse, summary="Change a user's role")
async def update_profile_role(
    profile_id: str,
    data: ProfileRoleUpdate,
    actor: Actor = Depends(get_current_reviewer),
    db: Session = Depends(get_db)
):
    return ProfileResponse.model_validate(ProfileService(db).update_role(actor, profile_id, data.role))
