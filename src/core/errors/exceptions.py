"""
Structured error type for the Business Central client.

Every failure that crosses the client boundary (HTTP error responses, network
failures, unparsable bodies, schema mismatches, token acquisition failures)
is normalized into a BusinessCentralError carrying a category, an advisory
retry strategy and whatever context was available.
"""

import errno
import socket
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from typing import Any

from core.errors.categorize import categorize_error, retry_strategy_for

# Import enums from canonical source to avoid duplicate enum issues
# (comparing enums from different classes always returns False)
from core.types import ErrorCategory, RetryStrategy

SCHEMA_MISMATCH_CODE = "Client_SchemaMismatch"
UNEXPECTED_RESPONSE_CODE = "Client_UnexpectedResponseFormat"
NETWORK_ERROR_CODE = "Client_NetworkError"
JSON_PARSE_ERROR_CODE = "Client_JsonParseError"
TOKEN_REQUEST_CODE = "Authentication_TokenRequest"

SCHEMA_MISMATCH_MESSAGE = (
    "Schema validation failed. The provided schema does not match "
    "Business Central's response format."
)
UNEXPECTED_RESPONSE_MESSAGE = "Business Central returned an unexpected response format"
MISSING_LIST_VALUE_MESSAGE = "Missing value property on list response."


@dataclass(frozen=True)
class ServerError:
    """The vendor's original error payload: ``{"error": {"code", "message"}}``."""

    code: str
    message: str


@dataclass(frozen=True)
class ValidationIssue:
    """A single schema validation failure with a dot-joined path."""

    message: str
    path: str


def _parse_server_error(body: Any) -> ServerError | None:
    if not isinstance(body, dict):
        return None
    error = body.get("error")
    if not isinstance(error, dict):
        return None
    code = error.get("code")
    message = error.get("message")
    if not isinstance(code, str) or not isinstance(message, str):
        return None
    return ServerError(code=code, message=message)


def _native_error_code(exc: BaseException) -> str | None:
    """Best-effort symbolic code (ECONNREFUSED, ETIMEDOUT, ...) for a transport error."""
    if isinstance(exc, TimeoutError):
        return "ETIMEDOUT"

    explicit = getattr(exc, "code", None)
    if isinstance(explicit, str) and explicit:
        return explicit

    candidates = [exc, getattr(exc, "os_error", None), exc.__cause__]
    for candidate in candidates:
        if candidate is None:
            continue
        if isinstance(candidate, socket.gaierror):
            return "ENOTFOUND"
        err_no = getattr(candidate, "errno", None)
        if isinstance(err_no, int) and err_no in errno.errorcode:
            return errno.errorcode[err_no]
    return None


class BusinessCentralError(Exception):
    """
    Normalized Business Central API error.

    Attributes:
        message: Human-readable error description
        code: Vendor error code, or a ``Client_*`` code for client-side failures
        category: Error classification (drives retry_strategy)
        http_status: HTTP status received, 0 when no response was received
        correlation_id: Value of the ``request-id`` response header, if any
        server_error: Original vendor error payload (matching error envelope only)
        response_data: Raw body that did not match the error envelope
        validation_details: Ordered schema validation issues
        cause: Original exception if wrapping
        timestamp: UTC time the error was created
    """

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        http_status: int = 0,
        code: str | None = None,
        correlation_id: str | None = None,
        server_error: ServerError | None = None,
        response_data: Any = None,
        validation_details: list[ValidationIssue] | None = None,
        cause: BaseException | None = None,
    ):
        self.message = message
        self.category = category
        self.http_status = http_status
        self.code = code or (server_error.code if server_error else "")
        self.correlation_id = correlation_id or None
        self.server_error = server_error
        # server_error and response_data are mutually exclusive
        self.response_data = None if server_error else response_data
        self.validation_details = validation_details
        self.cause = cause
        self.timestamp = datetime.now(UTC)
        super().__init__(message)

    @property
    def retry_strategy(self) -> RetryStrategy:
        return retry_strategy_for(self.category)

    @property
    def is_retryable(self) -> bool:
        return self.retry_strategy != RetryStrategy.NO_RETRY

    @property
    def should_refresh_auth(self) -> bool:
        return self.retry_strategy == RetryStrategy.REFRESH_TOKEN

    @property
    def has_validation_details(self) -> bool:
        return bool(self.validation_details)

    @property
    def is_schema_mismatch(self) -> bool:
        return self.category == ErrorCategory.SCHEMA_MISMATCH or self.has_validation_details

    def get_validation_fields(self) -> list[str]:
        """Paths of all failed validation issues, in original order."""
        return [issue.path for issue in self.validation_details or []]

    def to_log_dict(self) -> dict[str, Any]:
        """Flat representation for structured logging."""
        log = {
            "name": type(self).__name__,
            "message": self.message,
            "code": self.code,
            "category": self.category.value,
            "http_status": self.http_status,
            "retry_strategy": self.retry_strategy.value,
            "correlation_id": self.correlation_id,
            "timestamp": self.timestamp.isoformat(),
        }
        if self.server_error is not None:
            log["server_error"] = asdict(self.server_error)
        if self.response_data is not None:
            log["response_data"] = self.response_data
        if self.validation_details is not None:
            log["validation_details"] = [asdict(issue) for issue in self.validation_details]
            log["validation_count"] = len(self.validation_details)
        return log

    def to_span_attributes(self) -> dict[str, str | bool]:
        """OpenTelemetry-compatible attributes. Never contains None values."""
        return {
            "bc.error.code": self.code,
            "bc.error.category": self.category.value,
            "bc.error.retryable": self.is_retryable,
            "bc.request.correlation_id": self.correlation_id or "",
        }

    def __str__(self) -> str:
        parts = [self.message]
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)

    # =========================================================================
    # Factories
    # =========================================================================

    @classmethod
    def from_http_response(
        cls,
        status: int,
        body: Any,
        correlation_id: str | None = None,
    ) -> "BusinessCentralError":
        """Build from a non-2xx response. Falls back to UNEXPECTED_RESPONSE for unknown bodies."""
        server_error = _parse_server_error(body)
        if server_error is None:
            return cls.from_unexpected_response(body, status, correlation_id)

        categorization = categorize_error(server_error.code)
        return cls(
            server_error.message or "Unknown Business Central error",
            category=categorization.category,
            http_status=status,
            correlation_id=correlation_id,
            server_error=server_error,
        )

    @classmethod
    def from_unexpected_response(
        cls,
        body: Any,
        status: int,
        correlation_id: str | None = None,
    ) -> "BusinessCentralError":
        return cls(
            UNEXPECTED_RESPONSE_MESSAGE,
            category=ErrorCategory.UNEXPECTED_RESPONSE,
            http_status=status,
            code=UNEXPECTED_RESPONSE_CODE,
            correlation_id=correlation_id,
            response_data=body,
        )

    @classmethod
    def from_network_error(cls, exc: BaseException) -> "BusinessCentralError":
        """Transport-level failure: nothing was received from the server."""
        native_code = _native_error_code(exc)
        detail = str(exc) or type(exc).__name__
        if native_code and native_code not in detail:
            message = f"Network error ({native_code}): {detail}"
        else:
            message = f"Network error: {detail}"
        return cls(
            message,
            category=ErrorCategory.NETWORK_ERROR,
            http_status=0,
            code=native_code or NETWORK_ERROR_CODE,
            cause=exc,
        )

    @classmethod
    def from_json_error(
        cls,
        exc: BaseException,
        status: int,
        correlation_id: str | None = None,
    ) -> "BusinessCentralError":
        """Response arrived but its body could not be parsed as JSON."""
        return cls(
            f"Failed to parse Business Central response as JSON: {exc}",
            category=ErrorCategory.UNEXPECTED_RESPONSE,
            http_status=status,
            code=JSON_PARSE_ERROR_CODE,
            correlation_id=correlation_id,
            cause=exc,
        )

    @classmethod
    def from_validation_issues(
        cls,
        issues: list[ValidationIssue],
        http_status: int = 200,
        correlation_id: str | None = None,
    ) -> "BusinessCentralError":
        """Response body did not satisfy the caller-supplied schema."""
        return cls(
            SCHEMA_MISMATCH_MESSAGE,
            category=ErrorCategory.SCHEMA_MISMATCH,
            http_status=http_status,
            code=SCHEMA_MISMATCH_CODE,
            correlation_id=correlation_id,
            validation_details=list(issues),
        )

    @classmethod
    def from_missing_list_value(cls, envelope: Any) -> "BusinessCentralError":
        """List response without a ``value`` array. The envelope is kept as response_data."""
        return cls(
            MISSING_LIST_VALUE_MESSAGE,
            category=ErrorCategory.SCHEMA_MISMATCH,
            http_status=200,
            code=SCHEMA_MISMATCH_CODE,
            response_data=envelope,
            validation_details=[
                ValidationIssue(message=MISSING_LIST_VALUE_MESSAGE, path="root.value")
            ],
        )

    @classmethod
    def from_token_error(cls, exc: BaseException | None) -> "BusinessCentralError":
        """Token provider failed before any request was sent."""
        detail = str(exc) if exc is not None else "unknown error"
        return cls(
            f"Failed to acquire access token: {detail}",
            category=ErrorCategory.AUTHENTICATION,
            http_status=401,
            code=TOKEN_REQUEST_CODE,
            cause=exc,
        )


__all__ = [
    "BusinessCentralError",
    "ServerError",
    "ValidationIssue",
    "MISSING_LIST_VALUE_MESSAGE",
    "SCHEMA_MISMATCH_MESSAGE",
    "UNEXPECTED_RESPONSE_MESSAGE",
]
