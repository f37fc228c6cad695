"""
Database engine, declarative base and the data-access handle.

The handle is created once in the application lifespan, stored on
app.state and injected into routes through get_db().
"""
import logging
from typing import Any, Dict, List, Optional, Union

from fastapi import Request
from sqlalchemy import create_engine, event, text
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool
from sqlalchemy.sql import Executable

from app.core.exceptions import QueryError

logger = logging.getLogger(__name__)

Base = declarative_base()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    """SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Pooled access to the relational store."""

    def __init__(self, engine: Engine):
        self.engine = engine

    @classmethod
    def from_url(
        cls,
        url: str,
        *,
        pool_size: int = 5,
        max_overflow: int = 10,
        pool_timeout: int = 30,
        statement_timeout_ms: Optional[int] = None,
    ) -> "Database":
        """Create the engine (and its connection pool) for a database URL."""
        kwargs: Dict[str, Any] = {"pool_pre_ping": True}
        if url.startswith("sqlite"):
            kwargs["connect_args"] = {"check_same_thread": False}
            # In-memory databases live as long as their single connection
            if url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in url:
                kwargs["poolclass"] = StaticPool
        else:
            kwargs.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_timeout=pool_timeout,
            )
            if statement_timeout_ms:
                kwargs["connect_args"] = {"options": f"-c statement_timeout={statement_timeout_ms}"}

        engine = create_engine(url, **kwargs)
        if engine.dialect.name == "sqlite":
            event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        logger.info(f"Database engine created: {engine.url.render_as_string(hide_password=True)}")
        return cls(engine)

    @property
    def dialect_name(self) -> str:
        return self.engine.dialect.name

    def insert(self, table):
        """Dialect-specific INSERT construct (supports on_conflict_do_nothing)."""
        if self.dialect_name == "postgresql":
            return postgresql.insert(table)
        if self.dialect_name == "sqlite":
            return sqlite.insert(table)
        raise QueryError(f"Unsupported database dialect: {self.dialect_name}")

    def execute(
        self,
        statement: Union[str, Executable],
        params: Optional[Dict[str, Any]] = None,
    ) -> List[Dict[str, Any]]:
        """
        Execute one parameterized statement on a pooled connection.

        The connection is checked out for this call only and always returned
        to the pool. The statement commits on success and rolls back on error.

        Returns:
            Result rows as dicts (empty list for statements without rows)

        Raises:
            QueryError: The store rejected the statement
        """
        if isinstance(statement, str):
            statement = text(statement)
        try:
            with self.engine.begin() as conn:
                if params:
                    result = conn.execute(statement, params)
                else:
                    result = conn.execute(statement)
                if not result.returns_rows:
                    return []
                return [dict(row) for row in result.mappings()]
        except SQLAlchemyError as e:
            logger.error(f"Database query error: {e}")
            raise QueryError(orig=e) from e

    def check_connectivity(self) -> bool:
        """Run a trivial statement. For health and setup checks only."""
        try:
            self.execute("SELECT 1")
            return True
        except QueryError:
            logger.error("Database connection check failed")
            return False

    def dispose(self) -> None:
        self.engine.dispose()
        logger.info("Database connection pool disposed")


def get_db(request: Request) -> Database:
    """FastAPI dependency: the Database handle created at startup."""
    db = getattr(request.app.state, "db", None)
    if db is None:
        raise RuntimeError("Database not initialized. Start the app through its lifespan.")
    return db
