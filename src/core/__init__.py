"""
Core library: shared infrastructure for the Business Central client.

Modules:
    errors      - Error categorization tables and the structured error type
    logging     - Structured JSON logging with context variables
    oauth2      - Azure AD token acquisition with caching and refresh
    utils       - JSON serialization helpers
"""

from .types import ErrorCategory, RetryStrategy, TokenProvider

__version__ = "0.1.0"

__all__ = [
    "ErrorCategory",
    "RetryStrategy",
    "TokenProvider",
]
