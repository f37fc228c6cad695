"""Tests for profile reads and edits."""
import pytest
from pydantic import ValidationError as PydanticValidationError

from app.core.exceptions import NotFound, ValidationError
from app.crud import user_crud
from app.schema.user import ProfileUpdate
from app.service.identity_service import IdentityService
from app.service.user_service import UserService


class TestProfileUpdateSchema:
    def test_padding_does_not_count_toward_length(self):
        update = ProfileUpdate(username="  " + "a" * 50 + " ")
        assert update.username == "a" * 50

    def test_too_long_after_strip(self):
        with pytest.raises(PydanticValidationError):
            ProfileUpdate(username="a" * 51)

    def test_blank_username_is_none(self):
        update = ProfileUpdate(username="   ")
        assert update.username is None
        assert "username" in update.model_fields_set


class TestUpdateProfile:
    def test_missing_row(self, db, alice):
        with pytest.raises(NotFound):
            UserService(db).update_profile(alice.external_id, ProfileUpdate(bio="hi"))

    def test_keeping_own_username(self, db, alice):
        IdentityService(db).reconcile(alice)
        profile = UserService(db).update_profile(alice.external_id, ProfileUpdate(username="alice", bio="x"))
        assert profile.username == "alice"
        assert profile.bio == "x"

    def test_username_claimed_between_check_and_update(self, db, alice, bob, monkeypatch):
        service = IdentityService(db)
        service.reconcile(alice)
        service.reconcile(bob)
        # The availability check sees nothing; the unique constraint still holds
        monkeypatch.setattr(user_crud, "get_by_username", lambda database, username: None)

        with pytest.raises(ValidationError) as excinfo:
            UserService(db).update_profile(bob.external_id, ProfileUpdate(username="alice"))

        assert excinfo.value.message == "Username already taken"
        assert user_crud.get_by_external_id(db, bob.external_id)["username"] == "Bob"
