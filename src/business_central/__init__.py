"""
Typed async client for the Business Central OData REST API.

Components:
- BusinessCentralClient: authenticated request executor
- ApiPage / ApiQuery: paginated listing and CRUD per collection
- ClientConfig / AzureAuthConfig: validated connection settings
- PydanticSchema: record validation backed by pydantic
"""

from business_central.client import BusinessCentralClient
from business_central.config import AzureAuthConfig, ClientConfig
from business_central.pages import ApiPage, ApiQuery
from business_central.query import ODataQuery
from business_central.schema import (
    PydanticSchema,
    SchemaIssue,
    SchemaValidator,
    ValidationResult,
)
from core.errors import BusinessCentralError, ErrorCategory, RetryStrategy

__all__ = [
    "ApiPage",
    "ApiQuery",
    "AzureAuthConfig",
    "BusinessCentralClient",
    "BusinessCentralError",
    "ClientConfig",
    "ErrorCategory",
    "ODataQuery",
    "PydanticSchema",
    "RetryStrategy",
    "SchemaIssue",
    "SchemaValidator",
    "ValidationResult",
]
