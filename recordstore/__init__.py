"""
recordstore - embedded single-file record store on SQLite.

Two storage modes behind one driver interface:

- Schema-less: each record is stored as one JSON document.
- Hybrid: fields declared in a schema live in typed columns, every other
  field is folded into a side JSON payload and merged back on read.

The package is a library: callers construct a `RecordStore` (or the
`AsyncRecordStore` facade), optionally attach a schema, connect, and use
the insert/query/update/delete operations.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from recordstore.async_store import AsyncRecordStore
from recordstore.config import Settings, get_settings
from recordstore.domain.models import (
    FieldSpec,
    FieldType,
    Filter,
    Record,
    Schema,
    SchemaProvider,
    StorageMode,
)
from recordstore.domain.type_mapper import map_type_to_sql
from recordstore.errors import (
    ExtrasDecodeFailure,
    InvalidIdentifierError,
    NotConnectedError,
    RecordStoreError,
    SchemaError,
    SchemaLockedError,
)
from recordstore.infrastructure.db_factory import ConnectionOptions
from recordstore.interfaces import Driver
from recordstore.store import PreparedStatement, RecordStore, RunResult
from recordstore.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    "ConnectionOptions",
    # Store
    "RecordStore",
    "AsyncRecordStore",
    "Driver",
    "PreparedStatement",
    "RunResult",
    # Domain
    "FieldSpec",
    "FieldType",
    "Filter",
    "Record",
    "Schema",
    "SchemaProvider",
    "StorageMode",
    "map_type_to_sql",
    # Errors
    "RecordStoreError",
    "NotConnectedError",
    "SchemaLockedError",
    "SchemaError",
    "InvalidIdentifierError",
    "ExtrasDecodeFailure",
    # Logging
    "configure_logging",
    "get_logger",
]
