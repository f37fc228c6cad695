"""
Schema router - operator-only bootstrap endpoints. Not for runtime traffic.
"""
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from app.core.database import Database, get_db
from app.core.dependencies import require_admin_key
from app.core.exceptions import QueryError
from app.schema.admin import ConnectivityResponse, SchemaSetupResponse
from app.service.schema_service import SchemaManager

router = APIRouter(dependencies=[Depends(require_admin_key)])
logger = logging.getLogger(__name__)


@router.get("/check", response_model=ConnectivityResponse)
def check_database(db: Database = Depends(get_db)):
    """Run a trivial statement against the store."""
    connected = db.check_connectivity()
    return ConnectivityResponse(
        success=connected,
        message="Database connection successful" if connected else "Database connection failed",
        timestamp=datetime.now(timezone.utc),
    )


@router.get("/setup", response_model=SchemaSetupResponse)
def setup_schema(db: Database = Depends(get_db)):
    """Create and verify tables and indexes. Idempotent."""
    if not db.check_connectivity():
        raise QueryError("Failed to connect to database")
    tables = SchemaManager(db).ensure_schema()
    return SchemaSetupResponse(
        message="Database setup completed successfully",
        tables=tables,
        timestamp=datetime.now(timezone.utc),
    )


@router.post("/reset", response_model=SchemaSetupResponse)
def reset_schema(db: Database = Depends(get_db)):
    """Drop and recreate both tables. Deletes every user and post."""
    logger.warning("Schema reset requested")
    tables = SchemaManager(db).reset_schema()
    return SchemaSetupResponse(
        message="Database reset and setup completed successfully",
        tables=tables,
        timestamp=datetime.now(timezone.utc),
    )
