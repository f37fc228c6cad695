"""
User profile service.
"""
import logging

from sqlalchemy.exc import IntegrityError

from app.core.database import Database
from app.core.exceptions import NotFound, QueryError, ValidationError
from app.crud import user_crud
from app.schema.auth import ExternalIdentity
from app.schema.user import ProfileResponse, ProfileUpdate
from app.service.identity_service import IdentityService

logger = logging.getLogger(__name__)


class UserService:
    """Reads and edits the caller's own profile."""

    def __init__(self, db: Database):
        self.db = db

    def get_profile(self, identity: ExternalIdentity) -> ProfileResponse:
        """Find-or-create the caller's row and return it."""
        user = IdentityService(self.db).reconcile(identity)
        return ProfileResponse.model_validate(user)

    def update_profile(self, external_id: str, obj_in: ProfileUpdate) -> ProfileResponse:
        """
        Update username and/or bio. The row must already exist.

        Raises:
            ValidationError: The username belongs to another user
            NotFound: No row for external_id
        """
        if obj_in.username is not None:
            holder = user_crud.get_by_username(self.db, obj_in.username)
            if holder and holder["external_id"] != external_id:
                raise ValidationError("Username already taken")

        try:
            user = user_crud.update_profile(self.db, external_id=external_id, obj_in=obj_in)
        except QueryError as e:
            # Another request claimed the username after the check above
            if isinstance(e.orig, IntegrityError):
                logger.info(f"Username taken concurrently: {obj_in.username}")
                raise ValidationError("Username already taken") from e
            raise
        if not user:
            raise NotFound("Profile")
        logger.info(f"Profile updated: user_id={user['id']}")
        return ProfileResponse.model_validate(user)
