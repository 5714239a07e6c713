"""Base OAuth2 provider interface."""

from abc import ABC, abstractmethod

from core.oauth2.models import OAuth2Token


class BaseOAuth2Provider(ABC):
    """
    Abstract base class for OAuth2 token providers.

    Implementations acquire tokens for a requested scope. Caching and
    refresh timing are handled by OAuth2TokenManager.
    """

    def __init__(self, provider_name: str):
        """
        Initialize provider.

        Args:
            provider_name: Identifier used in logs
        """
        self.provider_name = provider_name

    @abstractmethod
    async def acquire_token(self, scope: str) -> OAuth2Token:
        """
        Acquire a new OAuth2 token.

        Args:
            scope: Resource scope (e.g. "https://api.businesscentral.dynamics.com/.default")

        Raises:
            TokenAcquisitionError: If token acquisition fails
        """
        pass

    async def refresh_token(self, token: OAuth2Token) -> OAuth2Token:
        """
        Refresh an existing token.

        The client credentials flow has no refresh token, so the default
        acquires a new token for the same scope.
        """
        return await self.acquire_token(token.scope or "")

    async def close(self) -> None:
        """Release provider resources. No-op by default."""
        return None


__all__ = ["BaseOAuth2Provider"]
