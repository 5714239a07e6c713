"""Azure AD OAuth2 provider."""

import logging

from azure.identity.aio import ClientSecretCredential

from core.oauth2.exceptions import InvalidConfigurationError, TokenAcquisitionError
from core.oauth2.models import OAuth2Token
from core.oauth2.providers.base import BaseOAuth2Provider

logger = logging.getLogger(__name__)


class AzureADProvider(BaseOAuth2Provider):
    """
    Azure AD OAuth2 provider using the client credentials flow.

    Uses azure-identity's async ClientSecretCredential. Tokens are requested
    per resource scope (e.g. https://api.businesscentral.dynamics.com/.default).
    """

    def __init__(
        self,
        provider_name: str,
        client_id: str,
        client_secret: str,
        tenant_id: str,
    ):
        """
        Initialize Azure AD provider.

        Args:
            provider_name: Identifier used in logs
            client_id: Azure AD application (client) ID
            client_secret: Azure AD client secret
            tenant_id: Azure AD tenant ID

        Raises:
            InvalidConfigurationError: If any credential field is missing
        """
        super().__init__(provider_name)

        if not all([client_id, client_secret, tenant_id]):
            raise InvalidConfigurationError(
                "client_id, client_secret, and tenant_id are required"
            )

        self.client_id = client_id
        self.tenant_id = tenant_id

        # Don't log the secret
        logger.debug(
            f"Initialized Azure AD provider '{provider_name}'",
            extra={"tenant_id": tenant_id, "client_id": client_id},
        )

        self._credential = ClientSecretCredential(
            tenant_id=tenant_id,
            client_id=client_id,
            client_secret=client_secret,
        )

    async def acquire_token(self, scope: str) -> OAuth2Token:
        """
        Acquire token from Azure AD.

        Raises:
            TokenAcquisitionError: If token acquisition fails
        """
        try:
            access_token = await self._credential.get_token(scope)
        except Exception as e:
            logger.error(
                f"Failed to acquire Azure AD token for '{self.provider_name}': {e}"
            )
            raise TokenAcquisitionError(f"Azure AD token acquisition failed: {e}") from e

        token = OAuth2Token.from_expires_on(
            access_token.token, access_token.expires_on, scope=scope
        )
        logger.debug(
            f"Acquired Azure AD token for '{self.provider_name}'",
            extra={"expires_at": token.expires_at.isoformat()},
        )
        return token

    async def close(self) -> None:
        await self._credential.close()


__all__ = ["AzureADProvider"]
