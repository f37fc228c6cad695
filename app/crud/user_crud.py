"""
User CRUD operations.
"""
from typing import Any, Dict, Optional

from sqlalchemy import update
from sqlalchemy.sql import func

from app.core.database import Database
from app.crud.base import CRUDBase
from app.model.user import User
from app.schema.user import ProfileUpdate


class CRUDUser(CRUDBase[User]):
    """User-specific CRUD operations."""

    def get_by_external_id(self, db: Database, external_id: str) -> Optional[Dict[str, Any]]:
        """Get user by identity-provider id."""
        return self.get_by_field(db, "external_id", external_id)

    def get_by_username(self, db: Database, username: str) -> Optional[Dict[str, Any]]:
        return self.get_by_field(db, "username", username)

    def create_if_absent(self, db: Database, *, obj_in: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Insert a user unless a unique constraint (external_id or username) is hit.
        Returns the new row, or None when nothing was inserted.
        """
        stmt = (
            db.insert(self.table)
            .values(**obj_in)
            .on_conflict_do_nothing()
            .returning(*self.table.c)
        )
        rows = db.execute(stmt)
        return rows[0] if rows else None

    def update_profile(
        self, db: Database, *, external_id: str, obj_in: ProfileUpdate
    ) -> Optional[Dict[str, Any]]:
        """Apply the fields the caller actually sent. None when no row matches."""
        values: Dict[str, Any] = {}
        if "username" in obj_in.model_fields_set:
            values["username"] = obj_in.username
        if "bio" in obj_in.model_fields_set:
            values["biography"] = obj_in.bio
        if not values:
            return self.get_by_external_id(db, external_id)
        return self._update_where_external_id(db, external_id, values)

    def refresh_identity(
        self,
        db: Database,
        *,
        external_id: str,
        email: str,
        first_name: Optional[str],
        last_name: Optional[str],
        avatar_url: Optional[str],
    ) -> Optional[Dict[str, Any]]:
        """Overwrite provider-owned attributes. None when no row matches."""
        return self._update_where_external_id(
            db,
            external_id,
            {
                "email": email,
                "first_name": first_name,
                "last_name": last_name,
                "avatar_url": avatar_url,
            },
        )

    def delete_by_external_id(self, db: Database, external_id: str) -> bool:
        """Hard delete; posts cascade. False when no row existed."""
        return bool(self.delete_by_field(db, "external_id", external_id))

    def _update_where_external_id(
        self, db: Database, external_id: str, values: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]:
        stmt = (
            update(self.table)
            .where(self.table.c.external_id == external_id)
            .values(**values, updated_at=func.now())
            .returning(*self.table.c)
        )
        rows = db.execute(stmt)
        return rows[0] if rows else None


user_crud = CRUDUser(User)
