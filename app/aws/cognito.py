"""
AWS Cognito wrapper class using boto3.
Cognito is the external identity provider: it authenticates users, we only read identities.
"""
from typing import Any, Dict, Optional
from botocore.exceptions import ClientError
import logging

from app.core.exceptions import IdentityUnavailable, ProviderUnavailable
from app.schema.auth import ExternalIdentity

logger = logging.getLogger(__name__)

# Token rejected by the pool (expired, revoked, malformed)
UNAUTHENTICATED_ERRORS = {"NotAuthorizedException", "UserNotFoundException", "UserNotConfirmedException"}


class CognitoIdentityProviderWrapper:
    """
    Reads identities from an Amazon Cognito user pool.
    The Cognito Username is the stable external id of a local user.
    """

    def __init__(self, cognito_client, user_pool_id: str):
        """
        Args:
            cognito_client: A Boto3 Cognito Identity Provider client
            user_pool_id: The ID of the Cognito user pool
        """
        self.cognito_client = cognito_client
        self.user_pool_id = user_pool_id

    @staticmethod
    def _to_identity(username: str, user_attributes) -> ExternalIdentity:
        """Map Cognito's Name/Value attribute list onto an ExternalIdentity."""
        attributes: Dict[str, Any] = {
            attr['Name']: attr['Value']
            for attr in user_attributes
        }
        return ExternalIdentity(
            external_id=username,
            email=attributes.get('email'),
            first_name=attributes.get('given_name'),
            last_name=attributes.get('family_name'),
            username=attributes.get('preferred_username'),
            avatar_url=attributes.get('picture'),
        )

    def get_user(self, access_token: str) -> ExternalIdentity:
        """
        Resolve an access token to the identity it was issued for.

        Raises:
            IdentityUnavailable: Cognito rejected the token
            ProviderUnavailable: Any other Cognito failure
        """
        try:
            response = self.cognito_client.get_user(AccessToken=access_token)
        except ClientError as e:
            error_code = e.response['Error']['Code']
            if error_code in UNAUTHENTICATED_ERRORS:
                logger.info(f"Token rejected by Cognito: {error_code}")
                raise IdentityUnavailable()
            logger.error(f"Get user failed: {e.response['Error']['Message']}")
            raise ProviderUnavailable() from e

        return self._to_identity(response['Username'], response['UserAttributes'])

    def admin_get_user(self, username: str) -> Optional[ExternalIdentity]:
        """
        Fetch an identity by Cognito Username (admin operation).

        Returns:
            The identity, or None when the pool has no such user

        Raises:
            ProviderUnavailable: Any other Cognito failure
        """
        try:
            response = self.cognito_client.admin_get_user(
                UserPoolId=self.user_pool_id,
                Username=username
            )
        except ClientError as e:
            if e.response['Error']['Code'] == 'UserNotFoundException':
                logger.warning(f"User not found in Cognito: {username}")
                return None
            logger.error(f"Admin get user failed for {username}: {e.response['Error']['Message']}")
            raise ProviderUnavailable() from e

        return self._to_identity(response['Username'], response['UserAttributes'])
