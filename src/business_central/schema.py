"""
Schema validation capability.

The client does not interpret record shapes itself. It hands each response
body (or each list item) to a SchemaValidator and either gets back the
validated/transformed value or a list of issues.

Any object with a ``validate(value)`` method returning a ValidationResult (or
an awaitable of one) is accepted. Pydantic models and annotated types are
wrapped in PydanticSchema automatically:

    page = client.page("salesOrders", SalesOrder)          # BaseModel subclass
    page = client.page("salesOrders", PydanticSchema(list[SalesOrder]))
"""

import inspect
from collections.abc import Awaitable, Sequence
from dataclasses import dataclass
from typing import Any, Generic, Protocol, TypeVar

from pydantic import TypeAdapter, ValidationError

from core.errors.exceptions import ValidationIssue

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)

ROOT_PATH = "root"


@dataclass(frozen=True)
class SchemaIssue:
    """Issue as reported by a validator. Path segments may be keys, indexes or objects with ``.key``."""

    message: str
    path: Sequence[Any] | None = None


@dataclass(frozen=True)
class ValidationResult(Generic[T]):
    """Outcome of a validate() call. ``issues`` being set (even empty) means failure."""

    value: T | None = None
    issues: Sequence[SchemaIssue] | None = None


@dataclass
class ParseResult(Generic[T]):
    data: T | None = None
    issues: list[ValidationIssue] | None = None

    @property
    def ok(self) -> bool:
        return self.issues is None


class SchemaValidator(Protocol[T_co]):
    def validate(self, value: Any) -> "ValidationResult[T_co] | Awaitable[ValidationResult[T_co]]": ...


class PydanticSchema(Generic[T]):
    """
    SchemaValidator backed by a pydantic TypeAdapter.

    Accepts a BaseModel subclass or any type pydantic understands
    (``list[Model]``, ``dict[str, int]``, ``Annotated[...]``).
    """

    def __init__(self, type_: Any):
        self.type_ = type_
        self._adapter: TypeAdapter = TypeAdapter(type_)

    def validate(self, value: Any) -> ValidationResult[T]:
        try:
            return ValidationResult(value=self._adapter.validate_python(value))
        except ValidationError as e:
            return ValidationResult(
                issues=[SchemaIssue(message=err["msg"], path=err["loc"]) for err in e.errors()]
            )

    def __repr__(self) -> str:
        return f"PydanticSchema({self.type_!r})"


def as_validator(schema: Any) -> SchemaValidator:
    """Return ``schema`` if it already validates, else wrap it in PydanticSchema."""
    # Classes are wrapped even if they have a validate attribute
    # (pydantic v1-style BaseModel.validate is a classmethod, not this protocol)
    if isinstance(schema, type):
        return PydanticSchema(schema)
    if callable(getattr(schema, "validate", None)):
        return schema
    return PydanticSchema(schema)


def _segment_to_str(segment: Any) -> str:
    key = getattr(segment, "key", None)
    if key is not None:
        return str(key)
    return str(segment)


def join_path(path: Sequence[Any] | str | None) -> str:
    """Join path segments with "." ("root" when empty)."""
    if isinstance(path, str):
        return path or ROOT_PATH
    if not path:
        return ROOT_PATH
    return ".".join(_segment_to_str(segment) for segment in path) or ROOT_PATH


async def parse_schema(schema: SchemaValidator[T], value: Any) -> ParseResult[T]:
    """
    Validate ``value`` against ``schema``, awaiting async validators.

    Returns:
        ParseResult with ``data`` on success or flattened ``issues`` on failure
    """
    result = schema.validate(value)
    if inspect.isawaitable(result):
        result = await result

    if result.issues is not None:
        return ParseResult(
            issues=[
                ValidationIssue(message=str(issue.message), path=join_path(issue.path))
                for issue in result.issues
            ]
        )

    return ParseResult(data=result.value)


__all__ = [
    "ParseResult",
    "PydanticSchema",
    "SchemaIssue",
    "SchemaValidator",
    "ValidationResult",
    "as_validator",
    "join_path",
    "parse_schema",
]
