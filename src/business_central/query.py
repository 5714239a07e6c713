"""OData query options and continuation-token helpers."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from urllib.parse import parse_qsl, quote, urlencode, urlsplit

SKIP_TOKEN_PARAM = "$skipToken"

# Characters OData expressions use that should stay readable in the URL
_ODATA_SAFE_CHARS = "$,'()/:@"


@dataclass
class ODataQuery:
    """
    Builder for OData system query options.

    Example:
        query = ODataQuery(filter="number eq 'S-ORD101001'", expand=["salesOrderLines"], top=10)
        query.to_query()
        # "$filter=number%20eq%20'S-ORD101001'&$expand=salesOrderLines&$top=10"
    """

    filter: str | None = None
    select: list[str] = field(default_factory=list)
    expand: list[str] = field(default_factory=list)
    orderby: str | None = None
    top: int | None = None
    skip: int | None = None
    extra: dict[str, str] = field(default_factory=dict)

    def to_params(self) -> list[tuple[str, str]]:
        params: list[tuple[str, str]] = []
        if self.filter:
            params.append(("$filter", self.filter))
        if self.select:
            params.append(("$select", ",".join(self.select)))
        if self.expand:
            params.append(("$expand", ",".join(self.expand)))
        if self.orderby:
            params.append(("$orderby", self.orderby))
        if self.top is not None:
            params.append(("$top", str(self.top)))
        if self.skip is not None:
            params.append(("$skip", str(self.skip)))
        params.extend((key, str(value)) for key, value in self.extra.items())
        return params

    def to_query(self) -> str:
        return encode_query(self.to_params())


QueryParams = ODataQuery | Mapping[str, str] | Sequence[tuple[str, str]] | str | None


def normalize_params(params: QueryParams) -> list[tuple[str, str]]:
    """
    Coerce any supported query representation into ordered key/value pairs.

    Accepts an ODataQuery, a mapping, a sequence of pairs, a query string
    (with or without a leading "?"), or None.
    """
    if params is None:
        return []
    if isinstance(params, ODataQuery):
        return params.to_params()
    if isinstance(params, str):
        return parse_qsl(params.lstrip("?"), keep_blank_values=True)
    if isinstance(params, Mapping):
        return [(str(key), str(value)) for key, value in params.items()]
    return [(str(key), str(value)) for key, value in params]


def encode_query(pairs: Sequence[tuple[str, str]]) -> str:
    return urlencode(pairs, quote_via=quote, safe=_ODATA_SAFE_CHARS)


def extract_skip_token(next_link: str | None) -> str:
    """
    Read the continuation token from an ``@odata.nextLink`` URL.

    Parameter name matching ignores case and a leading "$"
    (``$skiptoken``, ``$skipToken`` and ``skipToken`` all match).

    Returns:
        The token, or "" when the link carries none
    """
    if not next_link:
        return ""
    for key, value in parse_qsl(urlsplit(next_link).query, keep_blank_values=True):
        if key.lstrip("$").lower() == "skiptoken":
            return value
    return ""


__all__ = [
    "ODataQuery",
    "QueryParams",
    "SKIP_TOKEN_PARAM",
    "encode_query",
    "extract_skip_token",
    "normalize_params",
]
