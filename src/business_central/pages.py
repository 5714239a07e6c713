"""
Collection access: lazy paginated listing plus record-level CRUD.

ApiPage maps onto a Business Central API page (read/write entity set),
ApiQuery onto an API query (read-only).
"""

import logging
from collections.abc import AsyncIterator
from contextlib import aclosing
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from business_central.query import (
    SKIP_TOKEN_PARAM,
    QueryParams,
    extract_skip_token,
    normalize_params,
)
from business_central.schema import as_validator, parse_schema
from core.errors.exceptions import BusinessCentralError
from core.logging.context_managers import OperationContext

if TYPE_CHECKING:
    from business_central.client import BusinessCentralClient

logger = logging.getLogger(__name__)

T = TypeVar("T")

NEXT_LINK_KEY = "@odata.nextLink"
ACTION_NAMESPACE = "Microsoft.NAV"


class ApiPage(Generic[T]):
    """
    CRUD facade over one collection endpoint.

    Args:
        client: Client used to send requests
        endpoint: Collection path relative to the company URL (e.g. "salesOrders")
        schema: Validator (or pydantic type) for a single record
    """

    def __init__(self, client: "BusinessCentralClient", endpoint: str, schema: Any):
        self.client = client
        self.endpoint = endpoint
        self.schema = as_validator(schema)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(endpoint={self.endpoint!r}, schema={self.schema!r})"

    def _item_path(self, record_id: str) -> str:
        return f"{self.endpoint}({record_id})"

    async def list(
        self,
        query: QueryParams = None,
        *,
        max_results: int | None = None,
        server_page_limit: int | None = None,
    ) -> AsyncIterator[T]:
        """
        Iterate validated records across all pages.

        Pages are fetched lazily; breaking out of the loop stops further
        requests. Iteration ends when the server returns an empty ``value``
        array or ``max_results`` records have been yielded.

        Args:
            query: OData query options sent with every page request
            max_results: Stop after this many records. Must be positive; unlike
                a falsy "no cap" check, 0 is rejected rather than treated as
                unlimited (pass None for no cap)
            server_page_limit: Preferred server page size (a hint)

        Raises:
            BusinessCentralError: On request failure, a list envelope without
                ``value``, or a record failing validation
            ValueError: If max_results is not positive
        """
        if max_results is not None and max_results <= 0:
            raise ValueError(f"max_results must be positive, got: {max_results}")

        base_params = normalize_params(query)
        skip_token = ""
        yielded = 0
        page_number = 0

        with OperationContext(
            logger,
            "list_records",
            api_endpoint=self.endpoint,
            max_results=max_results,
        ) as op:
            while True:
                params = list(base_params)
                if skip_token:
                    params.append((SKIP_TOKEN_PARAM, skip_token))

                envelope = await self.client.request(
                    self.endpoint,
                    params=params,
                    server_page_size=server_page_limit,
                )
                page_number += 1

                items = envelope.get("value") if isinstance(envelope, dict) else None
                if not isinstance(items, list):
                    raise BusinessCentralError.from_missing_list_value(envelope)

                # Cursor only advances when the server sends a link
                next_link = envelope.get(NEXT_LINK_KEY)
                if next_link:
                    skip_token = extract_skip_token(next_link)

                logger.debug(
                    "Fetched list page",
                    extra={
                        "api_endpoint": self.endpoint,
                        "page_number": page_number,
                        "records_processed": len(items),
                        "has_next_link": bool(next_link),
                    },
                )
                op.add_context(page_number=page_number)

                if not items:
                    return

                for item in items:
                    result = await parse_schema(self.schema, item)
                    if result.issues is not None:
                        raise BusinessCentralError.from_validation_issues(result.issues)

                    yielded += 1
                    op.add_context(records_processed=yielded)
                    yield result.data

                    if max_results is not None and yielded >= max_results:
                        return

    async def find_one(self, query: QueryParams = None) -> T | None:
        """First record matching ``query``, or None when there is none."""
        async with aclosing(self.list(query, server_page_limit=1)) as records:
            async for record in records:
                return record
        return None

    async def get_by_id(self, record_id: str, query: QueryParams = None) -> T:
        return await self.client.request_with_schema(
            self._item_path(record_id), self.schema, params=query
        )

    async def create(self, payload: Any, query: QueryParams = None) -> T:
        return await self.client.request_with_schema(
            self.endpoint, self.schema, method="POST", params=query, payload=payload
        )

    async def update(self, record_id: str, payload: Any, query: QueryParams = None) -> T:
        """PATCH a record. Sent with ``If-Match: *`` so no etag is required."""
        return await self.client.request_with_schema(
            self._item_path(record_id),
            self.schema,
            method="PATCH",
            params=query,
            payload=payload,
        )

    async def delete(self, record_id: str) -> None:
        await self.client.request(self._item_path(record_id), method="DELETE")

    async def action(self, record_id: str, name: str) -> Any:
        """
        Invoke a bound action (e.g. ``post``, ``shipAndInvoice``) on a record.

        Returns:
            Raw response body, or None when the server returns no content
        """
        return await self.client.request(
            f"{self._item_path(record_id)}/{ACTION_NAMESPACE}.{name}",
            method="POST",
        )


class ApiQuery(Generic[T]):
    """Read-only view of a collection. Business Central API queries reject writes."""

    def __init__(self, client: "BusinessCentralClient", endpoint: str, schema: Any):
        self._page: ApiPage[T] = ApiPage(client, endpoint, schema)

    @property
    def endpoint(self) -> str:
        return self._page.endpoint

    def list(
        self,
        query: QueryParams = None,
        *,
        max_results: int | None = None,
        server_page_limit: int | None = None,
    ) -> AsyncIterator[T]:
        return self._page.list(
            query, max_results=max_results, server_page_limit=server_page_limit
        )

    async def find_one(self, query: QueryParams = None) -> T | None:
        return await self._page.find_one(query)


__all__ = [
    "ACTION_NAMESPACE",
    "ApiPage",
    "ApiQuery",
]
