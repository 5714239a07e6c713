"""
OAuth2 token management with caching and automatic refresh.

Basic Usage:
    from core.oauth2 import AzureADProvider, OAuth2TokenManager

    provider = AzureADProvider(
        provider_name="business_central",
        client_id=os.getenv("BC_CLIENT_ID"),
        client_secret=os.getenv("BC_CLIENT_SECRET"),
        tenant_id=os.getenv("BC_TENANT_ID"),
    )
    manager = OAuth2TokenManager(provider)

    # Get token (cached and refreshed per scope)
    token = await manager.get_token("https://api.businesscentral.dynamics.com/.default")
    headers = {"Authorization": f"Bearer {token}"}
"""

from core.oauth2.exceptions import (
    InvalidConfigurationError,
    OAuth2Error,
    TokenAcquisitionError,
)
from core.oauth2.manager import (
    DEFAULT_REFRESH_BUFFER_SECONDS,
    OAuth2TokenManager,
)
from core.oauth2.models import OAuth2Token
from core.oauth2.providers import AzureADProvider, BaseOAuth2Provider

__all__ = [
    # Manager
    "OAuth2TokenManager",
    "DEFAULT_REFRESH_BUFFER_SECONDS",
    # Providers
    "BaseOAuth2Provider",
    "AzureADProvider",
    # Models
    "OAuth2Token",
    # Exceptions
    "OAuth2Error",
    "TokenAcquisitionError",
    "InvalidConfigurationError",
]
