"""Client configuration for the Business Central API."""

import platform
import re
from dataclasses import dataclass
from importlib import metadata
from urllib.parse import urlparse

BC_BASE_URL = "https://api.businesscentral.dynamics.com/v2.0"
BC_DEFAULT_SCOPE = "https://api.businesscentral.dynamics.com/.default"
DEFAULT_TIMEOUT_SECONDS = 30.0
DISTRIBUTION_NAME = "bc-odata-client"

GUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


def is_valid_guid(value: object) -> bool:
    return isinstance(value, str) and GUID_PATTERN.match(value) is not None


def is_valid_url(value: object) -> bool:
    if not isinstance(value, str) or not value:
        return False
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def is_empty(value: object) -> bool:
    """True for None, blank strings and empty collections."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple, dict, set)):
        return len(value) == 0
    return False


def default_user_agent() -> str:
    """
    User agent in RFC 7231 product format.

    Example: ``bc-odata-client/0.1.0 (linux; Python 3.12.4; x86_64)``
    """
    try:
        version = metadata.version(DISTRIBUTION_NAME)
    except metadata.PackageNotFoundError:
        version = "0.0.0"
    return (
        f"{DISTRIBUTION_NAME}/{version} "
        f"({platform.system().lower()}; Python {platform.python_version()}; {platform.machine()})"
    )


@dataclass
class ClientConfig:
    """
    Business Central tenant/environment/company coordinates.

    Attributes:
        tenant_id: Azure AD tenant GUID
        environment: Environment name (e.g. "Production", "SANDBOX")
        company_id: Company GUID
        base_url: API root (default: public Business Central endpoint)
        timeout_seconds: Default per-request timeout
        user_agent: User-Agent header value (default derived from package metadata)

    Raises:
        ValueError: If any identifier is missing or malformed
    """

    tenant_id: str
    environment: str
    company_id: str
    base_url: str | None = None
    timeout_seconds: float | None = None
    user_agent: str | None = None

    def __post_init__(self):
        if self.base_url and not is_valid_url(self.base_url):
            raise ValueError(f"ClientConfig: a valid base_url is required, got: {self.base_url!r}")
        if not is_valid_guid(self.company_id):
            raise ValueError("ClientConfig: a valid company_id (GUID) is required")
        if not is_valid_guid(self.tenant_id):
            raise ValueError("ClientConfig: a valid tenant_id (GUID) is required")
        if is_empty(self.environment):
            raise ValueError("ClientConfig: a valid environment name is required")
        if self.timeout_seconds is not None and self.timeout_seconds <= 0:
            raise ValueError(
                f"ClientConfig: timeout_seconds must be positive, got: {self.timeout_seconds}"
            )

        self.base_url = (self.base_url or BC_BASE_URL).rstrip("/")
        self.timeout_seconds = float(self.timeout_seconds or DEFAULT_TIMEOUT_SECONDS)
        self.user_agent = self.user_agent or default_user_agent()


@dataclass
class AzureAuthConfig:
    """
    App registration used for the client credentials flow.

    Attributes:
        client_id: Application (client) GUID
        client_secret: Client secret
        tenant_id: Tenant override (defaults to ClientConfig.tenant_id)
    """

    client_id: str
    client_secret: str
    tenant_id: str | None = None

    def __post_init__(self):
        if not is_valid_guid(self.client_id):
            raise ValueError("AzureAuthConfig: a valid client_id (GUID) is required")
        if is_empty(self.client_secret):
            raise ValueError("AzureAuthConfig: client_secret is required")
        if self.tenant_id is not None and not is_valid_guid(self.tenant_id):
            raise ValueError("AzureAuthConfig: tenant_id must be a GUID when provided")

    def __repr__(self) -> str:
        # Don't leak the secret into logs
        return f"AzureAuthConfig(client_id={self.client_id!r}, tenant_id={self.tenant_id!r})"


__all__ = [
    "AzureAuthConfig",
    "BC_BASE_URL",
    "BC_DEFAULT_SCOPE",
    "ClientConfig",
    "DEFAULT_TIMEOUT_SECONDS",
    "default_user_agent",
    "is_empty",
    "is_valid_guid",
    "is_valid_url",
]
