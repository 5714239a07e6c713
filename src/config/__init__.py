"""Configuration loading for the Business Central client.

Settings come from config/config.yaml with ${VAR} expansion; BC_* environment
variables take priority over the file.

Usage Examples
--------------

    >>> from config import load_settings
    >>> from business_central import BusinessCentralClient
    >>>
    >>> settings = load_settings()
    >>> client = BusinessCentralClient.with_auth(settings.client, settings.api_path, settings.auth)

Configuration Priority
----------------------

1. BC_* environment variables
2. YAML configuration file
3. Dataclass defaults
"""

from config.config import (
    DEFAULT_API_PATH,
    Settings,
    expand_env_vars,
    load_api_path,
    load_auth_config,
    load_client_config,
    load_settings,
    load_yaml,
)

__all__ = [
    "DEFAULT_API_PATH",
    "Settings",
    "expand_env_vars",
    "load_api_path",
    "load_auth_config",
    "load_client_config",
    "load_settings",
    "load_yaml",
]
