"""
Session layer - Redis cache of identities resolved from bearer tokens.
Saves a round trip to the identity provider on every request.
"""
from typing import Optional
import hashlib
import logging
import redis

from app.schema.auth import ExternalIdentity

logger = logging.getLogger(__name__)


class SessionStore:
    """Token -> ExternalIdentity cache with TTL. Redis failures degrade to cache misses."""

    def __init__(self, client: redis.Redis, session_ttl: int = 900):
        self.client = client
        self.session_ttl = session_ttl

    @classmethod
    def connect(cls, host: str, port: int, db: int, session_ttl: int = 900) -> "SessionStore":
        """Create the Redis connection pool. Call once at app startup."""
        pool = redis.ConnectionPool(
            host=host,
            port=port,
            db=db,
            decode_responses=True,
            max_connections=10
        )
        client = redis.Redis(connection_pool=pool)
        client.ping()
        logger.info(f"Redis initialized: {host}:{port}/{db}, TTL: {session_ttl}s")
        return cls(client, session_ttl)

    @staticmethod
    def _key(token: str) -> str:
        # Raw tokens never become Redis keys
        return "session:" + hashlib.sha256(token.encode("utf-8")).hexdigest()

    @staticmethod
    def _user_key(external_id: str) -> str:
        return f"user:{external_id}"

    @staticmethod
    def _deleted_key(external_id: str) -> str:
        return f"deleted:{external_id}"

    def get(self, token: str) -> Optional[ExternalIdentity]:
        """Cached identity for a token, if any."""
        try:
            data = self.client.get(self._key(token))
        except redis.RedisError as e:
            logger.warning(f"Session lookup failed: {e}")
            return None
        if data:
            return ExternalIdentity.model_validate_json(data)
        return None

    def put(self, token: str, identity: ExternalIdentity) -> None:
        """Cache an identity and index its session key by external id."""
        key = self._key(token)
        user_key = self._user_key(identity.external_id)
        try:
            self.client.setex(key, self.session_ttl, identity.model_dump_json())
            self.client.sadd(user_key, key)
            self.client.expire(user_key, self.session_ttl)
        except redis.RedisError as e:
            logger.warning(f"Session store failed: {e}")

    def remove(self, token: str) -> bool:
        try:
            return self.client.delete(self._key(token)) > 0
        except redis.RedisError as e:
            logger.warning(f"Session removal failed: {e}")
            return False

    def forget_user(self, external_id: str) -> int:
        """
        Drop every cached session of a deleted identity.

        Also marks the id as deleted for one session TTL, so a provider
        answer that is still in flight cannot bring the identity back.

        Returns:
            Number of session entries removed
        """
        user_key = self._user_key(external_id)
        try:
            keys = list(self.client.smembers(user_key))
            removed = self.client.delete(*keys) if keys else 0
            self.client.delete(user_key)
            self.client.setex(self._deleted_key(external_id), self.session_ttl, "1")
        except redis.RedisError as e:
            logger.warning(f"Session purge failed for {external_id}: {e}")
            return 0
        logger.info(f"Sessions purged: external_id={external_id}, count={removed}")
        return removed

    def is_deleted(self, external_id: str) -> bool:
        try:
            return self.client.exists(self._deleted_key(external_id)) > 0
        except redis.RedisError as e:
            logger.warning(f"Deletion marker lookup failed: {e}")
            return False

    def restore_user(self, external_id: str) -> None:
        """Clear the deletion marker when the provider recreates the identity."""
        try:
            self.client.delete(self._deleted_key(external_id))
        except redis.RedisError as e:
            logger.warning(f"Deletion marker removal failed: {e}")

    def close(self) -> None:
        self.client.close()


def extract_token(auth_header: Optional[str]) -> Optional[str]:
    """Extract bearer token from Authorization header."""
    if not auth_header:
        return None

    parts = auth_header.split(" ")
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None

    return parts[1]
