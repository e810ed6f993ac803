"""
Translate abstract field-type descriptors into SQLite column types.

Resolution is by case-insensitive substring containment on the normalized
tag, so vendor-flavored tags ("EMAIL_STRING", "NUMBER_INT64", "DATETIME")
land on a sensible column type. Unknown tags fall back to TEXT; nothing here
raises.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Mapping

TEXT = "TEXT"
INTEGER = "INTEGER"
REAL = "REAL"
BLOB = "BLOB"

_TEXT_MARKERS = ("STRING", "TEXT", "EMAIL", "URL", "UUID", "CHAR")


def normalize_type_tag(descriptor: Any) -> str:
    """Unwrap a structured descriptor to its `type` tag and upper-case it."""
    tag = descriptor
    if isinstance(descriptor, Mapping):
        tag = descriptor.get("type", descriptor)
    elif not isinstance(descriptor, (str, Enum)) and getattr(descriptor, "type", None) is not None:
        tag = descriptor.type
    if isinstance(tag, Enum):
        tag = tag.value
    return str(tag).upper()


def map_type_to_sql(descriptor: Any) -> str:
    """
    Return the column type for a field descriptor.

    >>> map_type_to_sql("STRING")
    'TEXT'
    >>> map_type_to_sql({"type": "NUMBER_INT"})
    'INTEGER'
    """
    tag = normalize_type_tag(descriptor)

    if any(marker in tag for marker in _TEXT_MARKERS):
        return TEXT
    if "NUMBER" in tag:
        return INTEGER if "INT" in tag else REAL
    if "BOOLEAN" in tag:
        return INTEGER
    if "DATE" in tag:
        return TEXT
    if "BLOB" in tag or "BUFFER" in tag:
        return BLOB
    return TEXT


def is_boolean_type(descriptor: Any) -> bool:
    """True when the descriptor declares a boolean field (stored as 0/1)."""
    return "BOOLEAN" in normalize_type_tag(descriptor)


__all__ = [
    "TEXT",
    "INTEGER",
    "REAL",
    "BLOB",
    "normalize_type_tag",
    "map_type_to_sql",
    "is_boolean_type",
]
