"""
Schemas & Canonicalization
File: canonical.py

Purpose: Deterministic byte encoding of tree items prior to leaf hashing.

CRITICAL: All outputs from this module MUST be deterministic across runs.
Two builds over equal items must hash identical bytes.

Encoding rules (canonical_encode):
- bytes / bytearray / memoryview -> the raw bytes
- bool                           -> canonical JSON ("true" / "false")
- int                            -> uppercase hex, no prefix (255 -> "FF")
- str                            -> UTF-8
- anything else                  -> canonical JSON, UTF-8
"""

import json
import math
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel

from .errors import CanonicalizationException

# Canonical JSON separators - no whitespace
CANONICAL_JSON_SEPARATORS: tuple[str, str] = (",", ":")


def ensure_utc(dt: datetime) -> datetime:
    """
    Ensure a datetime is timezone-aware and in UTC.

    Rules:
        - If naive (no tzinfo): treat as UTC
        - If aware: convert to UTC
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_datetime_canonical(dt: datetime) -> str:
    """
    Format a datetime as ISO-8601 with Z suffix for UTC.

    Returns:
        ISO-8601 formatted string with Z suffix (e.g., "2026-01-27T21:35:00Z").
    """
    utc_dt = ensure_utc(dt)
    if utc_dt.microsecond == 0:
        return utc_dt.strftime("%Y-%m-%dT%H:%M:%SZ")
    return utc_dt.strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def _validate_float(value: float, path: str = "") -> None:
    """Reject NaN and Infinity, which have no canonical JSON form."""
    if not math.isfinite(value):
        raise CanonicalizationException(
            message=f"Non-finite float value encountered: {value}",
            details={"path": path, "value": str(value)},
        )


def canonicalize_value(value: Any, path: str = "") -> Any:
    """
    Recursively canonicalize a value for deterministic JSON serialization.

    Args:
        value: Any Python value to canonicalize.
        path: Current path for error reporting.

    Returns:
        A JSON-serializable canonical representation.

    Raises:
        CanonicalizationException: If the value (or a nested value) has no
            canonical form.
    """
    if value is None:
        return None

    if isinstance(value, bool):
        # Must check bool before int since bool is subclass of int
        return value

    if isinstance(value, int):
        return value

    if isinstance(value, float):
        _validate_float(value, path)
        return value

    if isinstance(value, str):
        return value

    if isinstance(value, datetime):
        return format_datetime_canonical(value)

    if isinstance(value, Enum):
        return canonicalize_value(value.value, path)

    if isinstance(value, BaseModel):
        dumped = value.model_dump(
            mode="json",
            by_alias=True,
            exclude_none=True,
        )
        return canonicalize_value(dumped, path)

    if isinstance(value, dict):
        # Keys are sorted during JSON serialization
        return {
            str(k): canonicalize_value(v, f"{path}.{k}" if path else str(k))
            for k, v in value.items()
            if v is not None
        }

    if isinstance(value, (list, tuple)):
        return [
            canonicalize_value(item, f"{path}[{i}]")
            for i, item in enumerate(value)
        ]

    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).hex()

    raise CanonicalizationException(
        message=f"Cannot canonicalize value of type {type(value).__name__}",
        details={"path": path, "type": type(value).__name__},
    )


def dumps_canonical(obj: Any) -> str:
    """
    Serialize an object to a canonical JSON string.

    The output has sorted keys, no extra whitespace, None fields excluded,
    datetimes as ISO-8601 with Z suffix, enums as their values and no
    NaN/Infinity floats.

    Raises:
        CanonicalizationException: If serialization fails.

    Example:
        >>> dumps_canonical({"b": 2, "a": 1})
        '{"a":1,"b":2}'
    """
    try:
        canonicalized = canonicalize_value(obj)
        return json.dumps(
            canonicalized,
            sort_keys=True,
            separators=CANONICAL_JSON_SEPARATORS,
            ensure_ascii=False,
        )
    except CanonicalizationException:
        raise
    except Exception as e:
        raise CanonicalizationException(
            message=f"Failed to serialize to canonical JSON: {e}",
            details={"type": type(obj).__name__, "error": str(e)},
        ) from e


def encode_int(value: int) -> str:
    """
    Uppercase hexadecimal form of an integer, without prefix or padding.

    >>> encode_int(255)
    'FF'
    >>> encode_int(-10)
    '-A'
    """
    return format(value, "X")


def canonical_encode(item: Any) -> bytes:
    """
    Encode a tree item as the bytes its leaf hash is computed over.

    Items of different types may share an encoding (``1`` and ``"1"``), so a
    tree is expected to hold items of one kind.

    Raises:
        CanonicalizationException: If the item has no canonical encoding.
    """
    if isinstance(item, (bytes, bytearray, memoryview)):
        return bytes(item)

    if isinstance(item, bool):
        return dumps_canonical(item).encode("utf-8")

    if isinstance(item, int):
        return encode_int(item).encode("ascii")

    if isinstance(item, str):
        return item.encode("utf-8")

    return dumps_canonical(item).encode("utf-8")
