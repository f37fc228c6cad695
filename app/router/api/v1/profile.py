"""
Profile router - the caller's own profile (protected).
"""
from fastapi import APIRouter, Depends

from app.core.database import Database, get_db
from app.core.dependencies import get_external_identity
from app.schema.auth import ExternalIdentity
from app.schema.user import ProfileEnvelope, ProfileUpdate
from app.service.user_service import UserService

router = APIRouter()


@router.get("", response_model=ProfileEnvelope)
def get_profile(
    identity: ExternalIdentity = Depends(get_external_identity),
    db: Database = Depends(get_db),
):
    """Get current user profile, creating the local row on first contact."""
    return ProfileEnvelope(profile=UserService(db).get_profile(identity))


@router.put("", response_model=ProfileEnvelope)
def update_profile(
    data: ProfileUpdate,
    identity: ExternalIdentity = Depends(get_external_identity),
    db: Database = Depends(get_db),
):
    """Update username and/or bio. 404 when the profile has not been created yet."""
    profile = UserService(db).update_profile(identity.external_id, data)
    return ProfileEnvelope(profile=profile, message="Profile updated successfully")
