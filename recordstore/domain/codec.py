"""
JSON codec for record payloads (`_data` blobs and `_extras`).

Plain JSON cannot carry binary values, so bytes-like values are written as
a one-key object `{"$bytes": "<base64>"}` and restored on decode. Dates and
datetimes are written as ISO-8601 strings and come back as strings.

A user object that looks like a tag (its only key is `$bytes` or `$escaped`)
is wrapped as `{"$escaped": {...}}` on encode and unwrapped on decode, so
caller data never turns into bytes by accident.
"""

from __future__ import annotations

import base64
import binascii
import json
from datetime import date, datetime
from typing import Any, Dict, Optional, Union

from recordstore.errors import ExtrasDecodeFailure

BYTES_KEY = "$bytes"
ESCAPE_KEY = "$escaped"

_TAG_KEYS = (BYTES_KEY, ESCAPE_KEY)


def _is_tag_shaped(obj: Dict[str, Any]) -> bool:
    return len(obj) == 1 and next(iter(obj)) in _TAG_KEYS


def _encode(value: Any) -> Any:
    if isinstance(value, dict):
        encoded = {key: _encode(item) for key, item in value.items()}
        return {ESCAPE_KEY: encoded} if _is_tag_shaped(value) else encoded
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_encode(item) for item in value]
    if isinstance(value, (bytes, bytearray, memoryview)):
        return {BYTES_KEY: base64.b64encode(bytes(value)).decode("ascii")}
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def _decode(value: Any) -> Any:
    if isinstance(value, dict):
        if _is_tag_shaped(value):
            key, inner = next(iter(value.items()))
            if key == ESCAPE_KEY and isinstance(inner, dict):
                return {k: _decode(item) for k, item in inner.items()}
            if key == BYTES_KEY and isinstance(inner, str):
                return base64.b64decode(inner, validate=True)
        return {key: _decode(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_decode(item) for item in value]
    return value


def dumps(value: Any) -> str:
    """Serialize a record (or any JSON-able value) to compact JSON text."""
    return json.dumps(_encode(value), ensure_ascii=False, separators=(",", ":"))


def loads(payload: Union[str, bytes]) -> Any:
    """Inverse of `dumps`. Raises `ValueError` on malformed input."""
    return _decode(json.loads(payload))


def decode_mapping(payload: Optional[Union[str, bytes]]) -> Dict[str, Any]:
    """
    Decode a stored payload that must hold a JSON object.

    Empty/NULL payloads decode to `{}`. Anything unparsable, or parsable but
    not an object, raises `ExtrasDecodeFailure`.
    """
    if payload is None or payload == "" or payload == b"":
        return {}
    try:
        value = loads(payload)
    except (ValueError, TypeError, binascii.Error) as exc:
        raise ExtrasDecodeFailure(f"Corrupt JSON payload: {exc}") from exc
    if not isinstance(value, dict):
        raise ExtrasDecodeFailure(f"Expected a JSON object, got {type(value).__name__}")
    return value


__all__ = ["BYTES_KEY", "ESCAPE_KEY", "dumps", "loads", "decode_mapping"]
