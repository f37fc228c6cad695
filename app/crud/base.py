"""
Base CRUD operations shared by all tables.
Statements are built with SQLAlchemy Core and run through the Database handle,
so every call is a single parameterized statement.
"""
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from sqlalchemy import delete, select

from app.core.database import Base, Database

ModelType = TypeVar("ModelType", bound=Base)


class CRUDBase(Generic[ModelType]):
    """Generic CRUD over one mapped table. Rows come back as dicts."""

    def __init__(self, model: Type[ModelType]):
        self.model = model
        self.table = model.__table__

    def get_by_field(self, db: Database, field: str, value: Any) -> Optional[Dict[str, Any]]:
        """Get the first row where field == value."""
        rows = db.execute(select(self.table).where(self.table.c[field] == value).limit(1))
        return rows[0] if rows else None

    def create_from_dict(self, db: Database, *, obj_in: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a row and return it."""
        rows = db.execute(db.insert(self.table).values(**obj_in).returning(*self.table.c))
        return rows[0]

    def delete_by_field(self, db: Database, field: str, value: Any) -> List[Dict[str, Any]]:
        """Delete matching rows; returns the deleted rows."""
        return db.execute(
            delete(self.table).where(self.table.c[field] == value).returning(*self.table.c)
        )
