"""
User profile schemas.
"""
from datetime import datetime
from typing import Optional
from pydantic import AliasChoices, BaseModel, Field, field_validator


class ProfileUpdate(BaseModel):
    """Body for PUT /profile. Only fields present in the request are written."""
    username: Optional[str] = Field(None, max_length=50)
    bio: Optional[str] = None

    @field_validator("username", mode="before")
    @classmethod
    def blank_username_is_none(cls, v):
        # Runs before max_length so surrounding whitespace does not count
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v


class ProfileResponse(BaseModel):
    id: int
    external_id: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    username: Optional[str] = None
    bio: Optional[str] = Field(None, validation_alias=AliasChoices("bio", "biography"))
    avatar_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class ProfileEnvelope(BaseModel):
    profile: ProfileResponse
    message: Optional[str] = None
