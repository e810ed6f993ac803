"""
Exception hierarchy for the hybrid record store.

Errors raised by SQLite itself (`sqlite3.IntegrityError` for a duplicate
`_id`, `sqlite3.OperationalError` from raw statements, ...) are never wrapped:
they reach the caller unchanged.
"""

from __future__ import annotations


class RecordStoreError(Exception):
    """Base class for all record store errors."""


class NotConnectedError(RecordStoreError):
    """Raised when an operation needs a connection and the store has none."""

    def __init__(self, message: str = "Database not connected. Call connect() first.") -> None:
        super().__init__(message)


class SchemaLockedError(RecordStoreError):
    """Raised when a schema is attached to a store that is already connected."""


class SchemaError(RecordStoreError, ValueError):
    """Raised for schema input that cannot be turned into field definitions."""


class InvalidIdentifierError(RecordStoreError, ValueError):
    """Raised for table or field names that are not plain SQL identifiers."""


class ExtrasDecodeFailure(RecordStoreError):
    """
    A stored JSON payload (`_extras` or `_data`) could not be decoded.

    Read paths catch this and substitute an empty mapping; it never escapes
    a query.
    """


__all__ = [
    "RecordStoreError",
    "NotConnectedError",
    "SchemaLockedError",
    "SchemaError",
    "InvalidIdentifierError",
    "ExtrasDecodeFailure",
]
