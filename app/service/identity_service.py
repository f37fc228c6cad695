"""
Identity reconciliation service.
Maps an identity authenticated by the external provider to exactly one local user row.
"""
import hashlib
import logging
from typing import Any, Dict, Optional, Tuple

from app.core.database import Database
from app.core.exceptions import (
    IdentityUnavailable,
    MissingPrimaryEmail,
    NotFound,
    ProviderUnavailable,
    QueryError,
)
from app.crud import user_crud
from app.schema.auth import ExternalIdentity

logger = logging.getLogger(__name__)

PLACEHOLDER_USERNAME = "user"
USERNAME_MAX_LENGTH = 50


def derive_username(identity: ExternalIdentity) -> str:
    """Username hint, else first name, else the placeholder."""
    for candidate in (identity.username, identity.first_name):
        if candidate and candidate.strip():
            return candidate.strip()[:USERNAME_MAX_LENGTH]
    return PLACEHOLDER_USERNAME


def username_candidates(base: str, external_id: str) -> Tuple[str, ...]:
    """Fallbacks used when the derived username belongs to someone else."""
    digest = hashlib.sha1(external_id.encode("utf-8")).hexdigest()
    short = f"_{external_id[-6:]}"
    hashed = f"_{digest[:16]}"
    return (
        base,
        base[: USERNAME_MAX_LENGTH - len(short)] + short,
        base[: USERNAME_MAX_LENGTH - len(hashed)] + hashed,
    )


class IdentityService:
    """Find-or-create, refresh and removal of local users keyed by external id."""

    def __init__(self, db: Database):
        self.db = db

    def reconcile(self, identity: Optional[ExternalIdentity]) -> Dict[str, Any]:
        """
        Return the local user for an authenticated identity, creating it on first contact.

        An existing row is returned unchanged; provider attributes are only
        refreshed by identity.updated events.

        Raises:
            IdentityUnavailable: No authenticated identity
            MissingPrimaryEmail: The row must be created but the identity has no email
        """
        if identity is None or not identity.external_id:
            raise IdentityUnavailable()

        user = user_crud.get_by_external_id(self.db, identity.external_id)
        if user:
            return user
        return self._create(identity)

    def upsert(self, identity: ExternalIdentity, *, refresh: bool = False) -> Dict[str, Any]:
        """
        Idempotent entry point for provider pushes and sync calls.

        refresh=False is find-or-create. refresh=True additionally overwrites
        email, names and avatar from the identity.
        """
        email = self._require_email(identity)
        user = self.reconcile(identity)
        if not refresh:
            return user

        updated = user_crud.refresh_identity(
            self.db,
            external_id=identity.external_id,
            email=email,
            first_name=identity.first_name or None,
            last_name=identity.last_name or None,
            avatar_url=identity.avatar_url or None,
        )
        if updated is None:
            # Deleted between the two statements; a later delivery will settle it
            logger.warning(f"User vanished during refresh: external_id={identity.external_id}")
            return user
        logger.info(f"User refreshed from provider: external_id={identity.external_id}")
        return updated

    def sync(self, external_id: str, provider) -> Tuple[Dict[str, Any], bool]:
        """
        Ensure a local row exists for a provider id, fetching the identity if needed.

        Returns:
            (user row, created flag)
        """
        user = user_crud.get_by_external_id(self.db, external_id)
        if user:
            return user, False

        if provider is None:
            raise ProviderUnavailable()
        identity = provider.admin_get_user(external_id)
        if identity is None:
            raise NotFound("Identity")
        return self.reconcile(identity), True

    def remove(self, external_id: str) -> bool:
        """Hard delete (posts cascade). Removing an absent user is not an error."""
        deleted = user_crud.delete_by_external_id(self.db, external_id)
        if deleted:
            logger.info(f"User deleted: external_id={external_id}")
        else:
            logger.warning(f"Delete for unknown user ignored: external_id={external_id}")
        return deleted

    def _require_email(self, identity: ExternalIdentity) -> str:
        email = identity.primary_email
        if not email:
            logger.error(f"No primary email found for identity: {identity.external_id}")
            raise MissingPrimaryEmail()
        return email

    def _create(self, identity: ExternalIdentity) -> Dict[str, Any]:
        email = self._require_email(identity)
        base = derive_username(identity)

        for username in username_candidates(base, identity.external_id):
            user = user_crud.create_if_absent(
                self.db,
                obj_in={
                    "external_id": identity.external_id,
                    "email": email,
                    "username": username,
                    "first_name": identity.first_name or None,
                    "last_name": identity.last_name or None,
                    "avatar_url": identity.avatar_url or None,
                    "biography": None,
                },
            )
            if user:
                logger.info(f"User created: external_id={identity.external_id}, id={user['id']}")
                return user

            # Nothing inserted: a concurrent request won the race, or the username is taken
            existing = user_crud.get_by_external_id(self.db, identity.external_id)
            if existing:
                return existing
            logger.warning(f"Username '{username}' already taken, trying next candidate")

        raise QueryError(f"Could not allocate a username for identity {identity.external_id}")
