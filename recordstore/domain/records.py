"""
Record splitting, merging and matching.

`split_record` partitions a logical record into the fields owned by the
schema (typed columns) and the extras (folded into the `_extras` JSON
payload). `merge_record` is its inverse for a stored row. `matches_filter`
implements the exact-match filter used by every query path.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Mapping, Optional, Tuple

from recordstore.domain import codec
from recordstore.domain.models import EXTRAS_COLUMN, RESERVED_FIELDS, Record
from recordstore.domain.type_mapper import is_boolean_type
from recordstore.errors import ExtrasDecodeFailure
from recordstore.utils.logging import get_logger

log = get_logger(__name__)

_SKIPPED_FIELDS = RESERVED_FIELDS | {EXTRAS_COLUMN}


def split_record(
    record: Mapping[str, Any], schema: Optional[Mapping[str, Any]]
) -> Tuple[Record, Record]:
    """
    Partition `record` into `(schema_fields, extra_fields)`.

    Reserved fields land in neither output. Without a schema everything else
    is an extra.
    """
    schema_fields: Record = {}
    extra_fields: Record = {}
    for key, value in record.items():
        if schema is not None and key in schema:
            schema_fields[key] = value
        elif key not in _SKIPPED_FIELDS:
            extra_fields[key] = value
    return schema_fields, extra_fields


def merge_record(
    row: Mapping[str, Any],
    extras_payload: Optional[Any],
    schema: Optional[Mapping[str, Any]],
) -> Record:
    """
    Rebuild a logical record from a stored hybrid row.

    Extras override native columns on key collision. A corrupt payload is
    logged and treated as empty so the rest of the row stays readable.
    """
    record: Record = {key: value for key, value in row.items() if key != EXTRAS_COLUMN}

    try:
        extras = codec.decode_mapping(extras_payload)
    except ExtrasDecodeFailure as exc:
        log.warning(
            "Ignoring undecodable extras payload",
            extra={"record_id": row.get("_id"), "error": str(exc)},
        )
        extras = {}
    record.update(extras)

    if schema:
        for name, descriptor in schema.items():
            if name in record and is_boolean_type(descriptor):
                record[name] = _to_bool(record[name])
    return record


def _to_bool(value: Any) -> Any:
    # Only numeric 0/1 storage encodings are coerced; anything else is left alone.
    if isinstance(value, bool) or value is None:
        return value
    if isinstance(value, (int, float)) and value in (0, 1):
        return bool(value)
    return value


def to_column_value(value: Any, field: Optional[str] = None) -> Any:
    """
    Convert a record value into something sqlite3 can bind to a typed column.

    Raises
    ------
    TypeError
        For container values, which have no column representation.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, (dict, list, tuple, set, frozenset)):
        raise TypeError(
            f"Cannot store {type(value).__name__} in typed column {field or '?'!r}; "
            "declare the field outside the schema to keep it in extras"
        )
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def strict_equals(left: Any, right: Any) -> bool:
    """
    Equality without cross-type coercion.

    Python treats `True == 1` and `0 == False`; records must not. Numbers
    still compare by value (`1 == 1.0`), and containers compare element-wise
    under the same rule.
    """
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left is right
    if isinstance(left, (int, float)) and isinstance(right, (int, float)):
        return left == right
    if isinstance(left, dict) and isinstance(right, dict):
        return left.keys() == right.keys() and all(
            strict_equals(left[key], right[key]) for key in left
        )
    if isinstance(left, (list, tuple)) and isinstance(right, (list, tuple)):
        return len(left) == len(right) and all(
            strict_equals(a, b) for a, b in zip(left, right)
        )
    if type(left) is not type(right) and not (
        isinstance(left, (bytes, bytearray)) and isinstance(right, (bytes, bytearray))
    ):
        return False
    return left == right


def matches_filter(record: Mapping[str, Any], filter_: Mapping[str, Any]) -> bool:
    """True when every filter entry is present in `record` with a strictly equal value."""
    for key, expected in filter_.items():
        if key not in record or not strict_equals(record[key], expected):
            return False
    return True


__all__ = [
    "split_record",
    "merge_record",
    "to_column_value",
    "strict_equals",
    "matches_filter",
]
