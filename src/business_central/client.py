"""Business Central REST API client: authenticated requests with structured errors."""

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any

import aiohttp

from business_central.config import (
    BC_DEFAULT_SCOPE,
    AzureAuthConfig,
    ClientConfig,
    is_empty,
)
from business_central.pages import ApiPage, ApiQuery
from business_central.query import QueryParams, encode_query, normalize_params
from business_central.schema import as_validator, parse_schema
from core.errors.exceptions import BusinessCentralError
from core.logging.context import get_log_context
from core.logging.context_managers import LogContext
from core.oauth2 import AzureADProvider, OAuth2TokenManager
from core.types import TokenProvider
from core.utils.json_serializers import json_serializer

logger = logging.getLogger(__name__)

# Headers
HEADER_AUTH = "Authorization"
HEADER_ACCEPT = "Accept"
HEADER_CONTENT_TYPE = "Content-Type"
HEADER_USER_AGENT = "User-Agent"
HEADER_DATA_ACCESS_INTENT = "Data-Access-Intent"
HEADER_IF_MATCH = "If-Match"
HEADER_PREFER = "Prefer"
HEADER_CORRELATION_ID = "request-id"

# Header values
CONTENT_TYPE_JSON = "application/json"
DATA_ACCESS_READONLY = "ReadOnly"
ODATA_MAX_PAGE_SIZE = "odata.maxpagesize"

SLOW_REQUEST_SECONDS = 2.0


@dataclass(frozen=True)
class ApiResponse:
    """Parsed body of a successful response plus the metadata errors need."""

    data: Any
    status: int
    correlation_id: str | None = None


class BusinessCentralClient:
    """
    Async client for one Business Central API path.

    Every call builds and sends exactly one request. Failures of any kind
    (token, network, body parsing, HTTP status, schema) are raised as
    BusinessCentralError. Nothing is retried; see BusinessCentralError.retry_strategy.

    Usage:
        config = ClientConfig(tenant_id=..., environment="Production", company_id=...)
        async with BusinessCentralClient(config, "v2.0", token_provider) as client:
            orders = client.page("salesOrders", SalesOrder)
            async for order in orders.list(max_results=50):
                ...
    """

    def __init__(
        self,
        config: ClientConfig,
        api_path: str,
        auth: TokenProvider,
        session: aiohttp.ClientSession | None = None,
    ):
        if is_empty(api_path):
            raise ValueError("BusinessCentralClient requires 'api_path' (e.g. 'v2.0')")
        if auth is None:
            raise ValueError("BusinessCentralClient requires a token provider")

        self.config = config
        self.api_path = api_path.strip("/")
        self.auth = auth
        self.scope = BC_DEFAULT_SCOPE
        self.timeout_seconds = config.timeout_seconds
        self.user_agent = config.user_agent
        self.api_url = (
            f"{config.base_url}/{config.tenant_id}/{config.environment}"
            f"/api/{self.api_path}/companies({config.company_id})"
        )

        self._session = session
        self._owns_session = session is None
        self._owns_auth = False
        self._closed = False

        logger.info(
            "BusinessCentralClient initialized",
            extra={
                "api_url": self.api_url,
                "timeout_seconds": self.timeout_seconds,
            },
        )

    @classmethod
    def with_auth(
        cls,
        config: ClientConfig,
        api_path: str,
        auth_config: AzureAuthConfig,
        session: aiohttp.ClientSession | None = None,
    ) -> "BusinessCentralClient":
        """Build a client whose tokens come from an Azure AD app registration."""
        provider = AzureADProvider(
            provider_name="business_central",
            client_id=auth_config.client_id,
            client_secret=auth_config.client_secret,
            tenant_id=auth_config.tenant_id or config.tenant_id,
        )
        client = cls(config, api_path, OAuth2TokenManager(provider), session=session)
        client._owns_auth = True
        return client

    async def __aenter__(self) -> "BusinessCentralClient":
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._closed:
            raise RuntimeError("BusinessCentralClient is closed, cannot create new session")
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        self._closed = True
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
            await asyncio.sleep(0)
        self._session = None
        if self._owns_auth and hasattr(self.auth, "close"):
            await self.auth.close()

    @staticmethod
    def _get_context_ids() -> dict[str, str]:
        """Extract non-empty context IDs (trace_id, operation, ...) for log enrichment."""
        return {k: v for k, v in get_log_context().items() if v}

    async def get_token(self) -> str:
        """Bearer token for the Business Central scope. Provider failures become AUTHENTICATION errors."""
        try:
            return await self.auth.get_token(self.scope)
        except Exception as e:
            error = BusinessCentralError.from_token_error(e)
            logger.warning(
                "Token acquisition failed",
                extra={
                    **self._get_context_ids(),
                    "error_category": error.category.value,
                    "error_message": str(e),
                },
            )
            raise error from e

    def build_url(self, endpoint: str, params: QueryParams = None) -> str:
        """Join ``endpoint`` onto the company URL and append encoded query options."""
        if endpoint.startswith("/"):
            endpoint = endpoint[1:]
        url = f"{self.api_url}/{endpoint}"

        pairs = normalize_params(params)
        if pairs:
            url = f"{url}?{encode_query(pairs)}"
        return url

    def _build_headers(
        self, method: str, token: str, server_page_size: int | None
    ) -> dict[str, str]:
        headers = {
            HEADER_AUTH: f"Bearer {token}",
            HEADER_ACCEPT: CONTENT_TYPE_JSON,
            HEADER_CONTENT_TYPE: CONTENT_TYPE_JSON,
            HEADER_USER_AGENT: self.user_agent,
        }

        # Lets the server route reads to a replica
        if method == "GET":
            headers[HEADER_DATA_ACCESS_INTENT] = DATA_ACCESS_READONLY

        # Unconditional overwrite, no client-side etag check
        if method == "PATCH":
            headers[HEADER_IF_MATCH] = "*"

        if server_page_size:
            headers[HEADER_PREFER] = f"{ODATA_MAX_PAGE_SIZE}={int(server_page_size)}"

        return headers

    def _log_failure(
        self,
        error: BusinessCentralError,
        endpoint: str,
        method: str,
        url: str,
        duration: float,
    ) -> None:
        logger.warning(
            "API request failed",
            extra={
                **self._get_context_ids(),
                "api_endpoint": endpoint,
                "api_method": method,
                "api_url": url,
                "http_status": error.http_status,
                "error_category": error.category.value,
                "error_code": error.code,
                "retry_strategy": error.retry_strategy.value,
                "correlation_id": error.correlation_id,
                "is_retryable": error.is_retryable,
                "duration_seconds": round(duration, 3),
            },
        )

    async def request(
        self,
        endpoint: str,
        *,
        method: str = "GET",
        params: QueryParams = None,
        payload: Any = None,
        timeout: float | None = None,
        server_page_size: int | None = None,
    ) -> Any:
        """
        Send one request and return the parsed JSON body.

        Args:
            endpoint: Path relative to the company URL (e.g. "salesOrders")
            method: GET, POST, PATCH or DELETE
            params: OData query options
            payload: JSON-serializable request body
            timeout: Per-request timeout in seconds (default: config.timeout_seconds)
            server_page_size: Preferred server page size (``Prefer: odata.maxpagesize``)

        Returns:
            Parsed JSON body, or None for an empty 2xx body

        Raises:
            BusinessCentralError: On any failure
            ValueError: If timeout is not positive
        """
        response = await self._execute(
            endpoint,
            method=method,
            params=params,
            payload=payload,
            timeout=timeout,
            server_page_size=server_page_size,
        )
        return response.data

    async def _execute(
        self,
        endpoint: str,
        *,
        method: str = "GET",
        params: QueryParams = None,
        payload: Any = None,
        timeout: float | None = None,
        server_page_size: int | None = None,
    ) -> ApiResponse:
        if timeout is not None and timeout <= 0:
            raise ValueError(f"timeout must be positive, got: {timeout}")

        with LogContext(tenant_id=self.config.tenant_id, company_id=self.config.company_id):
            return await self._send(
                endpoint,
                method.upper(),
                params,
                payload,
                timeout if timeout is not None else self.timeout_seconds,
                server_page_size,
            )

    async def _send(
        self,
        endpoint: str,
        method: str,
        params: QueryParams,
        payload: Any,
        request_timeout: float,
        server_page_size: int | None,
    ) -> ApiResponse:
        url = self.build_url(endpoint, params)
        ctx = self._get_context_ids()

        logger.debug(
            "API request starting",
            extra={
                **ctx,
                "api_endpoint": endpoint,
                "api_method": method,
                "api_url": url,
                "has_body": payload is not None,
                "server_page_size": server_page_size,
            },
        )

        token = await self.get_token()
        headers = self._build_headers(method, token, server_page_size)
        body = None
        if payload is not None:
            body = json.dumps(payload, default=json_serializer)

        session = await self._ensure_session()

        start_time = asyncio.get_running_loop().time()
        try:
            async with session.request(
                method,
                url,
                data=body,
                headers=headers,
                timeout=aiohttp.ClientTimeout(total=request_timeout),
            ) as response:
                status = response.status
                correlation_id = response.headers.get(HEADER_CORRELATION_ID, "")
                raw = await response.read()

        except (TimeoutError, aiohttp.ClientError) as e:
            duration = asyncio.get_running_loop().time() - start_time
            error = BusinessCentralError.from_network_error(e)
            self._log_failure(error, endpoint, method, url, duration)
            raise error from e

        duration = asyncio.get_running_loop().time() - start_time
        is_success = 200 <= status < 300

        if raw.strip():
            try:
                data = json.loads(raw)
            except ValueError as e:
                error = BusinessCentralError.from_json_error(e, status, correlation_id)
                self._log_failure(error, endpoint, method, url, duration)
                raise error from e
        elif is_success:
            data = None
        else:
            # Bodyless error response: keep the raw text as response_data
            data = raw.decode("utf-8", errors="replace")

        if not is_success:
            error = BusinessCentralError.from_http_response(status, data, correlation_id)
            self._log_failure(error, endpoint, method, url, duration)
            raise error

        log_level = logging.INFO if duration > SLOW_REQUEST_SECONDS else logging.DEBUG
        log_msg = "Slow API request" if duration > SLOW_REQUEST_SECONDS else "API request succeeded"
        logger.log(
            log_level,
            log_msg,
            extra={
                **ctx,
                "api_endpoint": endpoint,
                "api_method": method,
                "http_status": status,
                "correlation_id": correlation_id or None,
                "duration_seconds": round(duration, 3),
            },
        )

        return ApiResponse(data=data, status=status, correlation_id=correlation_id or None)

    async def request_with_schema(self, endpoint: str, schema: Any, **opts: Any) -> Any:
        """
        ``request`` followed by schema validation of the whole body.

        Returns:
            The validator's (possibly transformed) output

        Raises:
            BusinessCentralError: SCHEMA_MISMATCH (carrying the response status
                and correlation id) when validation reports issues, or any
                error ``request`` raises
        """
        response = await self._execute(endpoint, **opts)

        result = await parse_schema(as_validator(schema), response.data)
        if result.issues is not None:
            error = BusinessCentralError.from_validation_issues(
                result.issues,
                http_status=response.status,
                correlation_id=response.correlation_id,
            )
            logger.warning(
                "Response failed schema validation",
                extra={
                    **self._get_context_ids(),
                    "api_endpoint": endpoint,
                    "http_status": response.status,
                    "correlation_id": response.correlation_id,
                    "error_category": error.category.value,
                    "validation_fields": error.get_validation_fields(),
                },
            )
            raise error

        return result.data


    def page(self, endpoint: str, schema: Any) -> ApiPage:
        """CRUD access to a collection whose rows match ``schema``."""
        return ApiPage(self, endpoint, schema)

    def query(self, endpoint: str, schema: Any) -> ApiQuery:
        """Read-only access to a collection (API queries do not support writes)."""
        return ApiQuery(self, endpoint, schema)


__all__ = [
    "ApiResponse",
    "BusinessCentralClient",
    "HEADER_CORRELATION_ID",
]
