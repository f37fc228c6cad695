"""
FastAPI dependencies for route protection.
"""
import hmac
import logging
from functools import lru_cache
from typing import Any, Dict, Optional

from fastapi import Depends, Header, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.aws import CognitoIdentityProviderWrapper, get_aws_client
from app.core.config import settings
from app.core.database import Database, get_db
from app.core.exceptions import IdentityUnavailable, Unauthorized
from app.schema.auth import ExternalIdentity
from app.service.identity_service import IdentityService

logger = logging.getLogger(__name__)

# Security scheme for OpenAPI docs (shows lock icon and Authorization header)
bearer_scheme = HTTPBearer(
    scheme_name="Bearer",
    description="Cognito access token",
    auto_error=False,
)


@lru_cache
def get_identity_provider() -> Optional[CognitoIdentityProviderWrapper]:
    """Cognito wrapper, or None when the pool is not configured."""
    if not settings.use_cognito:
        return None
    return CognitoIdentityProviderWrapper(
        cognito_client=get_aws_client("cognito-idp"),
        user_pool_id=settings.COGNITO_USER_POOL_ID,
    )


def get_external_identity(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    provider: Optional[CognitoIdentityProviderWrapper] = Depends(get_identity_provider),
) -> ExternalIdentity:
    """
    Identity behind the bearer token: session cache first, then Cognito.

    Raises:
        IdentityUnavailable: No token, the provider rejected it, or the identity was deleted
    """
    token = getattr(request.state, "token", None) or (credentials.credentials if credentials else None)
    if not token:
        raise IdentityUnavailable()

    store = getattr(request.app.state, "session_store", None)
    identity = getattr(request.state, "identity", None)
    if identity is None:
        if provider is None:
            logger.error("Bearer token received but no identity provider is configured")
            raise IdentityUnavailable()
        identity = provider.get_user(token)
        if store is not None:
            store.put(token, identity)

    # A deleted identity must not be recreated by reconciliation
    if store is not None and store.is_deleted(identity.external_id):
        logger.info(f"Rejecting token of deleted identity: external_id={identity.external_id}")
        store.remove(token)
        raise IdentityUnavailable()
    return identity


def get_current_user(
    identity: ExternalIdentity = Depends(get_external_identity),
    db: Database = Depends(get_db),
) -> Dict[str, Any]:
    """Local user row for the caller, created on first contact."""
    return IdentityService(db).reconcile(identity)


def _key_matches(expected: Optional[str], supplied: Optional[str]) -> bool:
    if not expected or not supplied:
        return False
    return hmac.compare_digest(expected.encode("utf-8"), supplied.encode("utf-8"))


def require_admin_key(x_admin_key: Optional[str] = Header(None)) -> None:
    """Operator-only routes (schema setup/reset). Disabled when ADMIN_API_KEY is unset."""
    if not _key_matches(settings.ADMIN_API_KEY, x_admin_key):
        raise Unauthorized()


def require_sync_key(x_sync_key: Optional[str] = Header(None)) -> None:
    """Server-to-server identity sync. Disabled when SYNC_API_KEY is unset."""
    if not _key_matches(settings.SYNC_API_KEY, x_sync_key):
        raise Unauthorized()
