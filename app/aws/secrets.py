"""
AWS Secrets Manager lookup for database credentials.
"""
import json
import boto3
from botocore.exceptions import ClientError
import logging

logger = logging.getLogger(__name__)


def get_secret(secret_name: str, region_name: str = "us-east-1") -> dict:
    """
    Fetch a JSON secret and parse it.

    Args:
        secret_name: Name/path of the secret (e.g. "feed-backend/db")
        region_name: AWS region

    Returns:
        Dict containing the secret key-value pairs

    Raises:
        ClientError: Secret missing or access denied
        ValueError: Secret is not a JSON object
    """
    client = boto3.session.Session().client(
        service_name='secretsmanager',
        region_name=region_name
    )
    try:
        response = client.get_secret_value(SecretId=secret_name)
    except ClientError as e:
        logger.error(f"Could not read secret {secret_name}: {e.response['Error']['Code']}")
        raise

    secret = json.loads(response["SecretString"])
    if not isinstance(secret, dict):
        raise ValueError(f"Secret {secret_name} is not a JSON object")
    logger.info(f"Secret {secret_name} loaded")
    return secret
