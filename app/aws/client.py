"""
AWS client factory - centralized boto3 client creation.
"""
import boto3
from typing import Optional
from app.core.config import settings


def get_aws_client(service_name: str, region_name: Optional[str] = None):
    """
    Create a boto3 client for an AWS service.

    Args:
        service_name: AWS service name (e.g., 'cognito-idp')
        region_name: AWS region name (defaults to COGNITO_REGION from settings)
    """
    region = region_name or settings.COGNITO_REGION
    return boto3.client(service_name, region_name=region)
