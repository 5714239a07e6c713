"""
Business Central error code classification.

Maps opaque vendor error codes (``BadRequest_NotFound``, ``Internal_ServerError``,
...) to an ErrorCategory and an advisory RetryStrategy. Evaluated in priority
order: exact code, longest matching prefix, then UNKNOWN.
"""

from dataclasses import dataclass
from typing import Any

from core.types import ErrorCategory, RetryStrategy

# Known Business Central error codes
ERROR_CODE_CATEGORIES: dict[str, ErrorCategory] = {
    # Authentication
    "BadRequest_InvalidToken": ErrorCategory.AUTHENTICATION,
    "Unauthorized": ErrorCategory.AUTHENTICATION,
    "Authentication_TokenError": ErrorCategory.AUTHENTICATION,
    # Authorization (forbidden access to resources)
    "Forbidden": ErrorCategory.AUTHORIZATION,
    "Authorization_InsufficientPermissions": ErrorCategory.AUTHORIZATION,
    # Consumer errors
    "BadRequest": ErrorCategory.BAD_REQUEST,
    "BadRequest_InvalidRequestUrl": ErrorCategory.BAD_REQUEST,
    "BadRequest_NotFound": ErrorCategory.BAD_REQUEST,
    "BadRequest_MethodNotAllowed": ErrorCategory.BAD_REQUEST,
    "BadRequest_MethodNotImplemented": ErrorCategory.BAD_REQUEST,
    "BadRequest_RequiredParamNotProvided": ErrorCategory.BAD_REQUEST,
    "BadRequest_InvalidOperation": ErrorCategory.BAD_REQUEST,
    "SkipTokenIsNoLongerValid": ErrorCategory.BAD_REQUEST,
    "Application_FieldValidationException": ErrorCategory.BAD_REQUEST,
    "Application_StringExceededLength": ErrorCategory.BAD_REQUEST,
    "Application_InvalidGUID": ErrorCategory.BAD_REQUEST,
    "Application_FilterErrorException": ErrorCategory.BAD_REQUEST,
    # Business logic (usually caused by invalid data or operations)
    "Application_DialogException": ErrorCategory.BAD_REQUEST,
    "Application_EvaluateException": ErrorCategory.BAD_REQUEST,
    "Application_CallbackNotAllowed": ErrorCategory.BAD_REQUEST,
    # Not found
    "BadRequest_ResourceNotFound": ErrorCategory.NOT_FOUND,
    "Internal_RecordNotFound": ErrorCategory.NOT_FOUND,
    "Internal_CompanyNotFound": ErrorCategory.NOT_FOUND,
    "Internal_DataNotFoundFilter": ErrorCategory.NOT_FOUND,
    # Conflicts
    "Request_EntityChanged": ErrorCategory.CONFLICT,
    "Internal_EntityWithSameKeyExists": ErrorCategory.CONFLICT,
    # Server errors
    "Internal_ServerError": ErrorCategory.SERVER_ERROR,
    "Internal_TenantUnavailable": ErrorCategory.SERVER_ERROR,
    "Internal_DatabaseConnection": ErrorCategory.SERVER_ERROR,
}

# Defaults for codes that share a known prefix but are not listed above
PREFIX_CATEGORIES: dict[str, ErrorCategory] = {
    "BadRequest_": ErrorCategory.BAD_REQUEST,
    "Request_": ErrorCategory.CONFLICT,
    "Internal_": ErrorCategory.SERVER_ERROR,
    "Application_": ErrorCategory.BAD_REQUEST,
    "Authentication_": ErrorCategory.AUTHENTICATION,
    "Authorization_": ErrorCategory.AUTHORIZATION,
}

CATEGORY_RETRY_STRATEGY: dict[ErrorCategory, RetryStrategy] = {
    ErrorCategory.AUTHENTICATION: RetryStrategy.REFRESH_TOKEN,
    ErrorCategory.AUTHORIZATION: RetryStrategy.NO_RETRY,
    ErrorCategory.BAD_REQUEST: RetryStrategy.NO_RETRY,
    ErrorCategory.NOT_FOUND: RetryStrategy.NO_RETRY,
    ErrorCategory.CONFLICT: RetryStrategy.NO_RETRY,
    ErrorCategory.SCHEMA_MISMATCH: RetryStrategy.NO_RETRY,
    ErrorCategory.NETWORK_ERROR: RetryStrategy.EXPONENTIAL_BACKOFF,
    ErrorCategory.UNEXPECTED_RESPONSE: RetryStrategy.NO_RETRY,
    ErrorCategory.SERVER_ERROR: RetryStrategy.EXPONENTIAL_BACKOFF,
    ErrorCategory.UNKNOWN: RetryStrategy.NO_RETRY,
}


@dataclass(frozen=True)
class Categorization:
    """Category and advisory retry strategy for an error code."""

    category: ErrorCategory
    retry_strategy: RetryStrategy


def retry_strategy_for(category: ErrorCategory) -> RetryStrategy:
    return CATEGORY_RETRY_STRATEGY.get(category, RetryStrategy.NO_RETRY)


def _category_for_prefix(code: str) -> ErrorCategory | None:
    # Longest prefix wins so a more specific default can be added later
    matches = [prefix for prefix in PREFIX_CATEGORIES if code.startswith(prefix)]
    if not matches:
        return None
    return PREFIX_CATEGORIES[max(matches, key=len)]


def categorize_error(code: Any) -> Categorization:
    """
    Categorize a Business Central error code.

    Args:
        code: Vendor error code from the ``error.code`` field of a response

    Returns:
        Categorization with category and retry strategy. Unrecognized or
        non-string codes fall back to UNKNOWN / NO_RETRY.
    """
    if not isinstance(code, str) or not code:
        category = ErrorCategory.UNKNOWN
    else:
        category = (
            ERROR_CODE_CATEGORIES.get(code)
            or _category_for_prefix(code)
            or ErrorCategory.UNKNOWN
        )

    return Categorization(category=category, retry_strategy=retry_strategy_for(category))


__all__ = [
    "CATEGORY_RETRY_STRATEGY",
    "Categorization",
    "ERROR_CODE_CATEGORIES",
    "PREFIX_CATEGORIES",
    "categorize_error",
    "retry_strategy_for",
]
