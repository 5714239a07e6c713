"""
Error classification and the structured error type.

Provides:
- ErrorCategory / RetryStrategy enums
- Business Central error code categorization tables
- BusinessCentralError with factories for every failure source
"""

from core.errors.categorize import (
    # Tables
    CATEGORY_RETRY_STRATEGY,
    ERROR_CODE_CATEGORIES,
    PREFIX_CATEGORIES,
    # Classification
    Categorization,
    categorize_error,
    retry_strategy_for,
)
from core.errors.exceptions import (
    BusinessCentralError,
    ServerError,
    ValidationIssue,
)
from core.types import ErrorCategory, RetryStrategy

__all__ = [
    # Enums
    "ErrorCategory",
    "RetryStrategy",
    # Tables
    "CATEGORY_RETRY_STRATEGY",
    "ERROR_CODE_CATEGORIES",
    "PREFIX_CATEGORIES",
    # Classification
    "Categorization",
    "categorize_error",
    "retry_strategy_for",
    # Errors
    "BusinessCentralError",
    "ServerError",
    "ValidationIssue",
]
