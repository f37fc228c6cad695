"""
Identity schemas: the provider's view of a user and its push events.
"""
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from app.schema.user import ProfileResponse


class ExternalIdentity(BaseModel):
    """An identity already authenticated by the provider."""
    external_id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    username: Optional[str] = None
    avatar_url: Optional[str] = None

    @property
    def primary_email(self) -> Optional[str]:
        if self.email and self.email.strip():
            return self.email.strip()
        return None


class IdentityEmailAddress(BaseModel):
    id: str
    email_address: str


class IdentityEventData(BaseModel):
    """
    User payload of an identity.created / identity.updated event.
    Email is either given directly or picked from email_addresses by primary_email_address_id.
    """
    id: str = Field(..., min_length=1)
    email: Optional[str] = None
    email_addresses: List[IdentityEmailAddress] = Field(default_factory=list)
    primary_email_address_id: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    username: Optional[str] = None
    image_url: Optional[str] = None

    def to_identity(self) -> ExternalIdentity:
        email = self.email
        if not email and self.primary_email_address_id:
            for address in self.email_addresses:
                if address.id == self.primary_email_address_id:
                    email = address.email_address
                    break
        return ExternalIdentity(
            external_id=self.id,
            email=email,
            first_name=self.first_name,
            last_name=self.last_name,
            username=self.username,
            avatar_url=self.image_url,
        )


class IdentityEvent(BaseModel):
    type: str
    data: Dict[str, Any]


class MessageResponse(BaseModel):
    message: str


class IdentityResponse(BaseModel):
    """Result of a sync call or webhook delivery."""
    success: bool = True
    message: str
    user: Optional[ProfileResponse] = None
