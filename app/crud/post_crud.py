"""
Post CRUD operations.
"""
from typing import Any, Dict, List

from sqlalchemy import delete, desc, select

from app.core.database import Database
from app.crud.base import CRUDBase
from app.model.post import Post
from app.model.user import User


class CRUDPost(CRUDBase[Post]):
    """Post CRUD, newest first. Ownership filters live in the statements."""

    def _newest_first(self, stmt):
        # id breaks ties between posts created in the same clock tick
        return stmt.order_by(desc(self.table.c.created_at), desc(self.table.c.id))

    def list_public(self, db: Database) -> List[Dict[str, Any]]:
        """All posts with author display fields."""
        users = User.__table__
        stmt = select(
            self.table,
            users.c.username.label("author_username"),
            users.c.first_name.label("author_first_name"),
            users.c.last_name.label("author_last_name"),
            users.c.avatar_url.label("author_avatar_url"),
        ).join(users, users.c.id == self.table.c.user_id)
        return db.execute(self._newest_first(stmt))

    def list_by_user(self, db: Database, *, user_id: int) -> List[Dict[str, Any]]:
        stmt = select(self.table).where(self.table.c.user_id == user_id)
        return db.execute(self._newest_first(stmt))

    def delete_by_user_and_id(self, db: Database, *, user_id: int, post_id: int) -> bool:
        """Delete a post only if it belongs to the user, in one statement."""
        stmt = (
            delete(self.table)
            .where(self.table.c.id == post_id, self.table.c.user_id == user_id)
            .returning(self.table.c.id)
        )
        return bool(db.execute(stmt))


post_crud = CRUDPost(Post)
