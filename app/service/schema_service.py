"""
Schema bootstrap: create, verify and reset the users/posts tables.
Used at startup (AUTO_CREATE_SCHEMA) and by the operator endpoints, not on request paths.
"""
import logging
from typing import Dict, List

from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.schema import CreateTable, DropTable

from app.core.database import Database
from app.core.exceptions import QueryError, SchemaVerificationFailed
from app.model import Post, User

logger = logging.getLogger(__name__)

# Parents before children
TABLES = (User.__table__, Post.__table__)

REQUIRED_COLUMNS: Dict[str, set] = {
    "users": {"id", "external_id"},
    "posts": {"id", "user_id"},
}

INDEX_STATEMENTS = (
    "CREATE INDEX IF NOT EXISTS idx_users_username ON users (username)",
    "CREATE INDEX IF NOT EXISTS idx_posts_user_id ON posts (user_id)",
    "CREATE INDEX IF NOT EXISTS idx_posts_created_at ON posts (created_at DESC)",
)


class SchemaManager:
    """Idempotent schema setup over the Database handle."""

    def __init__(self, db: Database):
        self.db = db

    def ensure_schema(self) -> Dict[str, List[str]]:
        """
        Create tables if absent, verify them, then create indexes if absent.
        Safe to run repeatedly and from several processes at once.

        Returns:
            Table name -> column names, as found by introspection

        Raises:
            SchemaVerificationFailed: Tables or the ownership column are missing after creation
            QueryError: The store rejected a DDL statement
        """
        for table in TABLES:
            self.db.execute(CreateTable(table, if_not_exists=True))
        logger.info("Tables created (if not present)")

        found = self.verify()

        for statement in INDEX_STATEMENTS:
            self.db.execute(statement)
        logger.info("Database indexes setup completed")
        return found

    def reset_schema(self) -> Dict[str, List[str]]:
        """Drop both tables unconditionally and recreate them. Destroys all data."""
        logger.warning("Dropping posts and users tables")
        for table in reversed(TABLES):
            self.db.execute(DropTable(table, if_exists=True))
        return self.ensure_schema()

    def verify(self) -> Dict[str, List[str]]:
        """Check by introspection that every required table and column exists."""
        try:
            inspector = inspect(self.db.engine)
            existing = set(inspector.get_table_names())
            found = {
                name: sorted(col["name"] for col in inspector.get_columns(name))
                for name in REQUIRED_COLUMNS
                if name in existing
            }
        except SQLAlchemyError as e:
            logger.error(f"Schema introspection failed: {e}")
            raise QueryError(orig=e) from e

        missing = []
        for name, columns in REQUIRED_COLUMNS.items():
            if name not in found:
                missing.append(name)
                continue
            missing.extend(f"{name}.{col}" for col in sorted(columns - set(found[name])))

        if missing:
            logger.error(f"Schema verification failed, missing: {', '.join(missing)}")
            raise SchemaVerificationFailed()

        logger.info(f"Schema verified: {sorted(found)}")
        return found
