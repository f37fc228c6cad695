"""
AWS integrations layer.
"""
from app.aws.client import get_aws_client
from app.aws.cognito import CognitoIdentityProviderWrapper

__all__ = [
    "get_aws_client",
    "CognitoIdentityProviderWrapper",
]
