"""
Signature verification for identity-provider webhooks.

Scheme: headers webhook-id, webhook-timestamp and webhook-signature.
The signature header holds space-separated "v1,<base64>" entries, each an
HMAC-SHA256 over "{id}.{timestamp}.{body}" keyed with the shared secret.
"""
import base64
import binascii
import hashlib
import hmac
import logging
import time
from typing import Mapping, Optional

from app.core.exceptions import InvalidSignature

logger = logging.getLogger(__name__)

SECRET_PREFIX = "whsec_"
SIGNATURE_VERSION = "v1"


def _secret_bytes(secret: str) -> bytes:
    """whsec_<base64> secrets are decoded; anything else is used as raw UTF-8."""
    if secret.startswith(SECRET_PREFIX):
        try:
            return base64.b64decode(secret[len(SECRET_PREFIX):])
        except binascii.Error:
            logger.error("Webhook secret has whsec_ prefix but is not valid base64")
            raise InvalidSignature()
    return secret.encode("utf-8")


def sign_payload(secret: str, message_id: str, timestamp: str, body: bytes) -> str:
    """Compute the v1 signature entry for a payload."""
    signed = f"{message_id}.{timestamp}.".encode("utf-8") + body
    digest = hmac.new(_secret_bytes(secret), signed, digestmod=hashlib.sha256).digest()
    return f"{SIGNATURE_VERSION},{base64.b64encode(digest).decode()}"


def verify_webhook(
    secret: Optional[str],
    headers: Mapping[str, str],
    body: bytes,
    tolerance_seconds: int = 300,
    now: Optional[float] = None,
) -> None:
    """
    Verify a webhook delivery.

    Raises:
        InvalidSignature: Secret not configured, headers missing, stale timestamp or no matching signature
    """
    if not secret:
        logger.error("Webhook secret not configured; rejecting delivery")
        raise InvalidSignature()

    message_id = headers.get("webhook-id")
    timestamp = headers.get("webhook-timestamp")
    signature_header = headers.get("webhook-signature")
    if not message_id or not timestamp or not signature_header:
        raise InvalidSignature("Missing webhook signature headers")

    try:
        sent_at = int(timestamp)
    except ValueError:
        raise InvalidSignature("Invalid webhook timestamp")
    current = time.time() if now is None else now
    if abs(current - sent_at) > tolerance_seconds:
        raise InvalidSignature("Webhook timestamp outside tolerance")

    # Header values may carry non-ASCII characters; compare_digest only accepts ASCII str
    expected = sign_payload(secret, message_id, timestamp, body).encode("utf-8")
    for candidate in signature_header.split(" "):
        if hmac.compare_digest(candidate.encode("utf-8"), expected):
            return

    logger.warning(f"Webhook signature mismatch for delivery {message_id}")
    raise InvalidSignature()
