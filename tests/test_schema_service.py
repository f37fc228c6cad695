"""Tests for SchemaManager (create / verify / reset)."""
import pytest

from app.core.database import Database
from app.core.exceptions import SchemaVerificationFailed
from app.service.schema_service import SchemaManager


@pytest.fixture
def empty_db():
    database = Database.from_url("sqlite://")
    yield database
    database.dispose()


def _index_names(db: Database) -> set:
    rows = db.execute("SELECT name FROM sqlite_master WHERE type = 'index'")
    return {row["name"] for row in rows}


class TestEnsureSchema:
    def test_creates_tables_and_indexes(self, empty_db):
        found = SchemaManager(empty_db).ensure_schema()

        assert set(found) == {"users", "posts"}
        assert "external_id" in found["users"]
        assert "user_id" in found["posts"]
        assert {"idx_users_username", "idx_posts_user_id", "idx_posts_created_at"} <= _index_names(empty_db)

    def test_is_idempotent(self, empty_db):
        manager = SchemaManager(empty_db)
        manager.ensure_schema()
        empty_db.execute(
            "INSERT INTO users (external_id, email) VALUES (:e, :m)",
            {"e": "ext-1", "m": "a@example.com"},
        )

        manager.ensure_schema()

        assert empty_db.execute("SELECT COUNT(*) AS n FROM users") == [{"n": 1}]

    def test_fails_when_ownership_column_missing(self, empty_db):
        # A stale posts table without user_id survives CREATE TABLE IF NOT EXISTS
        empty_db.execute("CREATE TABLE posts (id INTEGER PRIMARY KEY, content TEXT NOT NULL)")

        with pytest.raises(SchemaVerificationFailed):
            SchemaManager(empty_db).ensure_schema()

        assert "idx_posts_user_id" not in _index_names(empty_db)


class TestVerify:
    def test_fails_on_empty_database(self, empty_db):
        with pytest.raises(SchemaVerificationFailed):
            SchemaManager(empty_db).verify()


class TestResetSchema:
    def test_drops_existing_rows(self, db):
        db.execute(
            "INSERT INTO users (external_id, email) VALUES (:e, :m)",
            {"e": "ext-1", "m": "a@example.com"},
        )

        found = SchemaManager(db).reset_schema()

        assert set(found) == {"users", "posts"}
        assert db.execute("SELECT COUNT(*) AS n FROM users") == [{"n": 0}]

    def test_works_on_empty_database(self, empty_db):
        found = SchemaManager(empty_db).reset_schema()
        assert set(found) == {"users", "posts"}
