"""
Core types and protocols used across modules.

This module provides base types, enums, and protocol definitions that are
shared across the core library to ensure consistency and type safety.
"""

from enum import Enum
from typing import Protocol


class ErrorCategory(Enum):
    """
    Classification of Business Central API failures.

    Every error surfaced by the client carries exactly one of these
    categories. The category alone decides the advisory retry strategy.

    Categories:
        AUTHENTICATION: Invalid/expired tokens, token acquisition failures
        AUTHORIZATION: Caller cannot access the table or resource
        BAD_REQUEST: Wrong URLs, invalid fields, malformed requests
        NOT_FOUND: Record or resource does not exist
        CONFLICT: Duplicate keys, entity changed since it was read
        SCHEMA_MISMATCH: Response does not match the caller's schema
        NETWORK_ERROR: Connection refused, DNS failure, timeout
        UNEXPECTED_RESPONSE: Body was not in the documented shape
        SERVER_ERROR: Internal server errors, database/tenant unavailable
        UNKNOWN: Unrecognized error code
    """

    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    BAD_REQUEST = "bad_request"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    SCHEMA_MISMATCH = "schema_mismatch"
    NETWORK_ERROR = "network_error"
    UNEXPECTED_RESPONSE = "unexpected_response"
    SERVER_ERROR = "server_error"
    UNKNOWN = "unknown"


class RetryStrategy(Enum):
    """
    Advisory retry recommendation attached to every error.

    The client never retries on its own; callers decide what to do with it.
    """

    NO_RETRY = "no_retry"
    EXPONENTIAL_BACKOFF = "exponential_backoff"
    REFRESH_TOKEN = "refresh_token"


class TokenProvider(Protocol):
    """
    Protocol for authentication token providers.

    Satisfied by OAuth2TokenManager, or by any object exposing an async
    get_token(scope) coroutine (e.g. a thin wrapper around azure-identity).
    """

    async def get_token(self, scope: str) -> str:
        """
        Get an access token for the specified scope.

        Args:
            scope: OAuth scope required (e.g. "https://api.businesscentral.dynamics.com/.default")

        Returns:
            Access token string
        """
        ...


__all__ = [
    "ErrorCategory",
    "RetryStrategy",
    "TokenProvider",
]
