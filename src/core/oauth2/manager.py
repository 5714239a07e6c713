"""OAuth2 token manager with per-scope caching and refresh."""

import asyncio
import logging
from typing import Any

from core.oauth2.exceptions import TokenAcquisitionError
from core.oauth2.models import OAuth2Token
from core.oauth2.providers.base import BaseOAuth2Provider

logger = logging.getLogger(__name__)

# Default token refresh buffer (5 minutes before expiry)
DEFAULT_REFRESH_BUFFER_SECONDS = 300


class OAuth2TokenManager:
    """
    Caches tokens from one provider and refreshes them before they expire.

    Satisfies the TokenProvider protocol, so it can be handed straight to
    BusinessCentralClient.

    Usage:
        provider = AzureADProvider(
            provider_name="business_central",
            client_id="...",
            client_secret="...",
            tenant_id="...",
        )
        manager = OAuth2TokenManager(provider)

        # Cached, refreshed 5 minutes before expiry
        token = await manager.get_token("https://api.businesscentral.dynamics.com/.default")
    """

    def __init__(
        self,
        provider: BaseOAuth2Provider,
        refresh_buffer_seconds: int = DEFAULT_REFRESH_BUFFER_SECONDS,
    ):
        """
        Initialize token manager.

        Args:
            provider: Provider used to acquire tokens
            refresh_buffer_seconds: Time before expiry to trigger refresh (default: 300s)
        """
        self.provider = provider
        self.refresh_buffer_seconds = refresh_buffer_seconds
        self._tokens: dict[str, OAuth2Token] = {}
        self._refresh_locks: dict[str, asyncio.Lock] = {}

        logger.debug(
            f"Initialized OAuth2TokenManager for '{provider.provider_name}' "
            f"with {refresh_buffer_seconds}s refresh buffer"
        )

    def _valid_cached(self, scope: str) -> OAuth2Token | None:
        token = self._tokens.get(scope)
        if token and not token.is_expired(self.refresh_buffer_seconds):
            return token
        return None

    async def get_token(self, scope: str, force_refresh: bool = False) -> str:
        """
        Get access token for ``scope``, with automatic caching and refresh.

        Concurrent callers for the same scope share a single refresh.

        Args:
            scope: Resource scope to request
            force_refresh: Force token refresh even if cached token is valid

        Returns:
            Access token string

        Raises:
            TokenAcquisitionError: If token acquisition fails
        """
        if not force_refresh:
            cached_token = self._valid_cached(scope)
            if cached_token:
                logger.debug(
                    f"Using cached token for scope '{scope}' "
                    f"(expires in {cached_token.remaining_lifetime.total_seconds():.0f}s)"
                )
                return cached_token.access_token

        refresh_lock = self._refresh_locks.setdefault(scope, asyncio.Lock())
        async with refresh_lock:
            # Another coroutine may have refreshed while we waited
            if not force_refresh:
                cached_token = self._valid_cached(scope)
                if cached_token:
                    logger.debug(f"Token was refreshed by another coroutine for scope '{scope}'")
                    return cached_token.access_token

            try:
                current_token = self._tokens.get(scope)
                if current_token:
                    logger.debug(f"Refreshing token for scope '{scope}'")
                    new_token = await self.provider.refresh_token(current_token)
                else:
                    logger.debug(f"Acquiring new token for scope '{scope}'")
                    new_token = await self.provider.acquire_token(scope)
            except TokenAcquisitionError:
                raise
            except Exception as e:
                logger.error(f"Failed to get token for scope '{scope}': {e}")
                raise TokenAcquisitionError(f"Failed to get token for scope '{scope}': {e}") from e

            self._tokens[scope] = new_token
            logger.info(
                f"Token for '{self.provider.provider_name}' valid until "
                f"{new_token.expires_at.isoformat()}"
            )
            return new_token.access_token

    def clear_token(self, scope: str | None = None) -> None:
        """
        Clear cached token(s).

        Args:
            scope: Scope to clear. If None, clears all tokens.
        """
        if scope:
            self._tokens.pop(scope, None)
            logger.debug(f"Cleared token for scope '{scope}'")
        else:
            self._tokens.clear()
            logger.debug("Cleared all tokens")

    def get_cached_token_info(self, scope: str) -> dict[str, Any] | None:
        """
        Get information about cached token for diagnostics.

        Returns:
            Dict with token info, or None if no token cached
        """
        token = self._tokens.get(scope)
        if not token:
            return None

        return {
            "provider_name": self.provider.provider_name,
            "expires_at": token.expires_at.isoformat(),
            "remaining_seconds": token.remaining_lifetime.total_seconds(),
            "is_expired": token.is_expired(self.refresh_buffer_seconds),
            "token_type": token.token_type,
            "scope": token.scope,
        }

    async def close(self) -> None:
        """Close the provider and drop cached tokens."""
        try:
            await self.provider.close()
        except Exception as e:
            logger.warning(f"Error closing provider '{self.provider.provider_name}': {e}")
        self._tokens.clear()
        logger.info("OAuth2TokenManager closed")


__all__ = [
    "OAuth2TokenManager",
    "DEFAULT_REFRESH_BUFFER_SECONDS",
]
