"""Shared JSON serialization helpers for request bodies and log records."""

import dataclasses
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any
from uuid import UUID

from pydantic import BaseModel


def _serialize_known_type(obj: Any) -> tuple[bool, Any]:
    """Try to serialize by known type. Returns (handled, result)."""
    if isinstance(obj, BaseModel):
        return True, obj.model_dump(mode="json", by_alias=True, exclude_unset=True)
    if isinstance(obj, (datetime, date)):
        return True, obj.isoformat()
    if isinstance(obj, Decimal):
        return True, float(obj)
    if isinstance(obj, (UUID, Path)):
        return True, str(obj)
    if isinstance(obj, Enum):
        return True, obj.value
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return True, dataclasses.asdict(obj)
    return False, None


def json_serializer(obj: Any) -> Any:
    """
    ``default=`` hook for json.dumps.

    - pydantic models -> dict (aliases, unset fields omitted)
    - datetime/date -> ISO 8601 string
    - Decimal -> float
    - UUID/Path -> string
    - Enums -> value
    - dataclasses -> dict
    - Everything else -> string (fallback)

    Args:
        obj: Object to serialize

    Returns:
        JSON-serializable representation with proper types
    """
    handled, result = _serialize_known_type(obj)
    if handled:
        return result
    if hasattr(obj, "__dict__"):
        return obj.__dict__
    return str(obj)


__all__ = ["json_serializer"]
