"""Tests for webhook signature verification."""
import base64

import pytest

from app.core.exceptions import InvalidSignature
from app.core.security import sign_payload, verify_webhook

SECRET = "whsec_" + base64.b64encode(b"0123456789abcdef").decode()
NOW = 1_700_000_000
BODY = b'{"type":"identity.created","data":{"id":"user_1"}}'


def _headers(secret=SECRET, message_id="msg_1", timestamp=str(NOW), body=BODY):
    return {
        "webhook-id": message_id,
        "webhook-timestamp": timestamp,
        "webhook-signature": sign_payload(secret, message_id, timestamp, body),
    }


class TestSignPayload:
    def test_versioned_base64_entry(self):
        signature = sign_payload(SECRET, "msg_1", str(NOW), BODY)
        version, encoded = signature.split(",", 1)
        assert version == "v1"
        assert len(base64.b64decode(encoded)) == 32

    def test_prefixed_secret_is_decoded(self):
        raw = sign_payload("0123456789abcdef", "msg_1", str(NOW), BODY)
        assert sign_payload(SECRET, "msg_1", str(NOW), BODY) == raw


class TestVerifyWebhook:
    def test_valid(self):
        verify_webhook(SECRET, _headers(), BODY, now=NOW)

    def test_within_tolerance(self):
        verify_webhook(SECRET, _headers(), BODY, tolerance_seconds=300, now=NOW + 299)

    def test_any_listed_signature_may_match(self):
        headers = _headers()
        headers["webhook-signature"] = "v1,c3RhbGU= " + headers["webhook-signature"]
        verify_webhook(SECRET, headers, BODY, now=NOW)

    def test_tampered_body(self):
        with pytest.raises(InvalidSignature):
            verify_webhook(SECRET, _headers(), BODY.replace(b"user_1", b"user_2"), now=NOW)

    def test_wrong_secret(self):
        with pytest.raises(InvalidSignature):
            verify_webhook(SECRET, _headers(secret="another-secret"), BODY, now=NOW)

    def test_stale(self):
        with pytest.raises(InvalidSignature) as excinfo:
            verify_webhook(SECRET, _headers(), BODY, tolerance_seconds=300, now=NOW + 301)
        assert "tolerance" in excinfo.value.message

    def test_from_the_future(self):
        with pytest.raises(InvalidSignature):
            verify_webhook(SECRET, _headers(), BODY, tolerance_seconds=300, now=NOW - 301)

    def test_non_numeric_timestamp(self):
        with pytest.raises(InvalidSignature):
            verify_webhook(SECRET, _headers(timestamp="yesterday"), BODY, now=NOW)

    @pytest.mark.parametrize("missing", ["webhook-id", "webhook-timestamp", "webhook-signature"])
    def test_missing_header(self, missing):
        headers = _headers()
        del headers[missing]
        with pytest.raises(InvalidSignature):
            verify_webhook(SECRET, headers, BODY, now=NOW)

    @pytest.mark.parametrize("secret", [None, ""])
    def test_secret_not_configured(self, secret):
        with pytest.raises(InvalidSignature):
            verify_webhook(secret, _headers(), BODY, now=NOW)

    def test_non_ascii_signature_is_rejected(self):
        headers = _headers()
        headers["webhook-signature"] = "v1,\xe9abc"
        with pytest.raises(InvalidSignature):
            verify_webhook(SECRET, headers, BODY, now=NOW)
