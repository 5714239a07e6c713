"""Business Central client configuration from YAML and environment.

Loads config/config.yaml:

    business_central:
      tenant_id: ${BC_TENANT_ID}
      environment: ${BC_ENVIRONMENT:-Production}
      company_id: ${BC_COMPANY_ID}
      api_path: v2.0
    auth:
      client_id: ${BC_CLIENT_ID}
      client_secret: ${BC_CLIENT_SECRET}

Environment variables ARE supported using ${VAR_NAME} and ${VAR_NAME:-default}
syntax in YAML files. The BC_* variables also override the file directly.
"""

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from business_central.config import AzureAuthConfig, ClientConfig

logger = logging.getLogger(__name__)

# Default config file: config.yaml beside this module
DEFAULT_CONFIG_FILE = Path(__file__).parent / "config.yaml"
DEFAULT_API_PATH = "v2.0"

_ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::-(([^}]*))?)?\}")


def load_yaml(path: Path) -> dict[str, Any]:
    """Load YAML file and return dict."""
    if not path.exists():
        return {}
    with open(path) as f:
        return yaml.safe_load(f) or {}


def expand_env_vars(data: Any) -> Any:
    """Recursively expand ${VAR_NAME} and ${VAR_NAME:-default} environment variables in config data."""
    if isinstance(data, dict):
        return {key: expand_env_vars(value) for key, value in data.items()}
    elif isinstance(data, list):
        return [expand_env_vars(item) for item in data]
    elif isinstance(data, str):

        def replacer(match):
            var_name = match.group(1)
            default_value = match.group(2) if match.group(2) is not None else match.group(0)
            return os.getenv(var_name, default_value)

        return _ENV_VAR_PATTERN.sub(replacer, data)
    else:
        return data


def _load_section(config_path: Path | None, section: str) -> dict[str, Any]:
    path = config_path or DEFAULT_CONFIG_FILE
    if config_path is not None and not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    data = expand_env_vars(load_yaml(path))
    value = data.get(section) or {}
    if not isinstance(value, dict):
        raise ValueError(f"Invalid config file {path}: '{section}:' must be a mapping")
    return value


def load_client_config(config_path: Path | None = None) -> ClientConfig:
    """
    Build ClientConfig from the ``business_central:`` section.

    BC_TENANT_ID, BC_ENVIRONMENT, BC_COMPANY_ID, BC_BASE_URL,
    BC_TIMEOUT_SECONDS and BC_USER_AGENT take priority over the file.

    Args:
        config_path: YAML file (default: config/config.yaml, optional)

    Raises:
        FileNotFoundError: If an explicit config_path does not exist
        ValueError: If the resulting settings are invalid
    """
    section = _load_section(config_path, "business_central")

    timeout = os.getenv("BC_TIMEOUT_SECONDS") or section.get("timeout_seconds")

    config = ClientConfig(
        tenant_id=os.getenv("BC_TENANT_ID") or section.get("tenant_id", ""),
        environment=os.getenv("BC_ENVIRONMENT") or section.get("environment", ""),
        company_id=os.getenv("BC_COMPANY_ID") or section.get("company_id", ""),
        base_url=os.getenv("BC_BASE_URL") or section.get("base_url") or None,
        timeout_seconds=float(timeout) if timeout else None,
        user_agent=os.getenv("BC_USER_AGENT") or section.get("user_agent") or None,
    )

    logger.debug(
        "Client configuration loaded",
        extra={"tenant_id": config.tenant_id, "company_id": config.company_id},
    )
    return config


def load_auth_config(config_path: Path | None = None) -> AzureAuthConfig:
    """
    Build AzureAuthConfig from the ``auth:`` section.

    BC_CLIENT_ID, BC_CLIENT_SECRET and BC_AUTH_TENANT_ID take priority over the file.

    Raises:
        FileNotFoundError: If an explicit config_path does not exist
        ValueError: If the credentials are missing or malformed
    """
    section = _load_section(config_path, "auth")

    config = AzureAuthConfig(
        client_id=os.getenv("BC_CLIENT_ID") or section.get("client_id", ""),
        client_secret=os.getenv("BC_CLIENT_SECRET") or section.get("client_secret", ""),
        tenant_id=os.getenv("BC_AUTH_TENANT_ID") or section.get("tenant_id") or None,
    )

    logger.debug("Auth configuration loaded", extra={"client_id": config.client_id})
    return config


def load_api_path(config_path: Path | None = None) -> str:
    """API path segment (``v2.0``, ``contoso/app1/v1.0``) from BC_API_PATH or the file."""
    section = _load_section(config_path, "business_central")
    return os.getenv("BC_API_PATH") or section.get("api_path") or DEFAULT_API_PATH


@dataclass
class Settings:
    """Everything needed to build a BusinessCentralClient.with_auth()."""

    client: ClientConfig
    auth: AzureAuthConfig
    api_path: str = DEFAULT_API_PATH


def load_settings(config_path: Path | None = None) -> Settings:
    """Load client, auth and API path in one call."""
    if config_path is None:
        logger.info(f"Loading configuration from file: {DEFAULT_CONFIG_FILE}")
    else:
        logger.info(f"Loading configuration from file: {config_path}")

    return Settings(
        client=load_client_config(config_path),
        auth=load_auth_config(config_path),
        api_path=load_api_path(config_path),
    )


__all__ = [
    "DEFAULT_API_PATH",
    "DEFAULT_CONFIG_FILE",
    "Settings",
    "expand_env_vars",
    "load_api_path",
    "load_auth_config",
    "load_client_config",
    "load_settings",
    "load_yaml",
]
