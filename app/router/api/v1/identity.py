"""
Identity router - provider pushes and server-to-server sync.
Both end up in IdentityService's idempotent upsert.
"""
import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, Request
from pydantic import ValidationError as PydanticValidationError
from starlette.concurrency import run_in_threadpool

from app.aws import CognitoIdentityProviderWrapper
from app.core.config import settings
from app.core.database import Database, get_db
from app.core.dependencies import get_identity_provider, require_sync_key
from app.core.exceptions import MalformedPayload
from app.core.security import verify_webhook
from app.schema.auth import IdentityEvent, IdentityEventData, IdentityResponse
from app.schema.user import ProfileResponse
from app.service.identity_service import IdentityService
from app.session import SessionStore

router = APIRouter()
logger = logging.getLogger(__name__)

IDENTITY_CREATED = "identity.created"
IDENTITY_UPDATED = "identity.updated"
IDENTITY_DELETED = "identity.deleted"


@router.post("/identity-sync", response_model=IdentityResponse, dependencies=[Depends(require_sync_key)])
def identity_sync(
    x_user_id: Optional[str] = Header(None),
    db: Database = Depends(get_db),
    provider: Optional[CognitoIdentityProviderWrapper] = Depends(get_identity_provider),
):
    """Ensure a local user exists for the provider id in X-User-Id."""
    if not x_user_id or not x_user_id.strip():
        raise MalformedPayload("No user ID provided")

    user, created = IdentityService(db).sync(x_user_id.strip(), provider)
    return IdentityResponse(
        message="User created successfully" if created else "User already exists",
        user=ProfileResponse.model_validate(user),
    )


def _event_data(event: IdentityEvent) -> IdentityEventData:
    try:
        return IdentityEventData.model_validate(event.data)
    except PydanticValidationError as e:
        logger.warning(f"Malformed {event.type} payload: {e.error_count()} error(s)")
        raise MalformedPayload("Malformed identity payload")


def handle_identity_event(
    db: Database, event: IdentityEvent, store: Optional[SessionStore] = None
) -> IdentityResponse:
    """
    Apply one provider event. Every branch is safe to replay.

    When a session store is given, a deleted identity's cached sessions are
    purged so its tokens stop resolving.
    """
    service = IdentityService(db)

    if event.type in (IDENTITY_CREATED, IDENTITY_UPDATED):
        identity = _event_data(event).to_identity()
        user = service.upsert(identity, refresh=event.type == IDENTITY_UPDATED)
        if store is not None and event.type == IDENTITY_CREATED:
            store.restore_user(identity.external_id)
        action = "created" if event.type == IDENTITY_CREATED else "updated"
        return IdentityResponse(
            message=f"User {action} successfully",
            user=ProfileResponse.model_validate(user),
        )

    if event.type == IDENTITY_DELETED:
        external_id = event.data.get("id")
        if not isinstance(external_id, str) or not external_id:
            raise MalformedPayload("Malformed identity payload")
        removed = service.remove(external_id)
        if store is not None:
            store.forget_user(external_id)
        if removed:
            return IdentityResponse(message="User deleted successfully")
        return IdentityResponse(message="User already absent")

    logger.info(f"Ignoring webhook event type: {event.type}")
    return IdentityResponse(message="Webhook received")


@router.post("/identity-webhook", response_model=IdentityResponse)
async def identity_webhook(request: Request, db: Database = Depends(get_db)):
    """Signed identity.created / identity.updated / identity.deleted events from the provider."""
    body = await request.body()
    verify_webhook(
        settings.IDENTITY_WEBHOOK_SECRET,
        request.headers,
        body,
        tolerance_seconds=settings.WEBHOOK_TOLERANCE_SECONDS,
    )

    try:
        event = IdentityEvent.model_validate(json.loads(body))
    except (json.JSONDecodeError, UnicodeDecodeError, PydanticValidationError):
        raise MalformedPayload("Invalid webhook payload")

    store = getattr(request.app.state, "session_store", None)
    return await run_in_threadpool(handle_identity_event, db, event, store)
