"""Record identifiers and timestamps."""

from __future__ import annotations

import secrets
import time
from datetime import datetime, timezone

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def _base36(value: int) -> str:
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits)) or "0"


def generate_id() -> str:
    """
    Return a new record id: epoch milliseconds plus a random base36 suffix.

    The millisecond prefix keeps ids roughly time-ordered; the 64-bit random
    suffix makes collisions within the same millisecond negligible.
    """
    millis = time.time_ns() // 1_000_000
    return f"{millis}_{_base36(secrets.randbits(64))}"


def utc_now_iso() -> str:
    """Current UTC time as ISO-8601 with millisecond precision, e.g. 2024-01-02T03:04:05.678Z."""
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


__all__ = ["generate_id", "utc_now_iso"]
