"""Tests for the Secrets Manager lookup."""
import json
from unittest.mock import MagicMock

import boto3
import pytest
from botocore.exceptions import ClientError

from app.aws.secrets import get_secret


@pytest.fixture
def secrets_client(monkeypatch):
    client = MagicMock()
    session = MagicMock()
    session.client.return_value = client
    monkeypatch.setattr(boto3.session, "Session", lambda: session)
    return client


def test_parses_json_secret(secrets_client):
    secrets_client.get_secret_value.return_value = {
        "SecretString": json.dumps({"host": "db.internal", "username": "feed", "password": "pw", "database": "feed"})
    }

    secret = get_secret("feed-backend/db", region_name="eu-west-1")

    assert secret["host"] == "db.internal"
    secrets_client.get_secret_value.assert_called_once_with(SecretId="feed-backend/db")


def test_non_object_secret(secrets_client):
    secrets_client.get_secret_value.return_value = {"SecretString": '"just a string"'}
    with pytest.raises(ValueError):
        get_secret("feed-backend/db")


def test_access_denied_propagates(secrets_client):
    secrets_client.get_secret_value.side_effect = ClientError(
        {"Error": {"Code": "AccessDeniedException", "Message": "denied"}}, "GetSecretValue"
    )
    with pytest.raises(ClientError):
        get_secret("feed-backend/db")
