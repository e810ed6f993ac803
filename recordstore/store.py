"""
SQLite-backed record store with schema-less and hybrid storage modes.

Usage:
    from recordstore import RecordStore, Schema, FieldType

    store = RecordStore("app.db", "users", schema=Schema(definition={
        "name": FieldType.STRING,
        "active": FieldType.BOOLEAN,
    }))
    with store:
        created = store.insert({"name": "ada", "active": True, "role": "admin"})
        store.update({"_id": created["_id"]}, {"role": "owner"})
        admins = store.query({"role": "owner"})

Without a schema every record is one JSON document. With a schema, declared
fields live in typed columns and the rest is folded into `_extras`. The mode
is fixed when the store connects.

Filtering is exact-match and happens in memory over materialized records,
except that any filter naming `_id` is served by a primary-key lookup.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Union

from recordstore.config import Settings, get_settings
from recordstore.domain.models import (
    CREATED_AT_FIELD,
    EXTRAS_COLUMN,
    ID_FIELD,
    RESERVED_FIELDS,
    UPDATED_AT_FIELD,
    Filter,
    Record,
    StorageMode,
    resolve_definitions,
    validate_identifier,
)
from recordstore.domain.records import matches_filter
from recordstore.errors import NotConnectedError, SchemaLockedError
from recordstore.infrastructure.db_factory import ConnectionOptions, open_connection
from recordstore.strategies import (
    AbstractStorageStrategy,
    index_statements,
    quote_identifier,
    strategy_for,
)
from recordstore.utils.identifiers import generate_id, utc_now_iso
from recordstore.utils.logging import get_logger

log = get_logger(__name__)

_CALLER_IGNORED = RESERVED_FIELDS | {EXTRAS_COLUMN}


def _user_fields(data: Mapping[str, Any]) -> Record:
    """Drop fields the store owns from caller input."""
    if not isinstance(data, Mapping):
        raise TypeError(f"Record data must be a mapping, got {type(data).__name__}")
    return {key: value for key, value in data.items() if key not in _CALLER_IGNORED}


@dataclass(frozen=True)
class RunResult:
    """Outcome of a write through a prepared statement."""

    changes: int
    last_insert_rowid: Optional[int]


class PreparedStatement:
    """
    A SQL statement bound to the store's connection.

    Parameters may be given positionally (`stmt.run(1, "a")`), as a single
    sequence, or as a single mapping for named placeholders. Nothing here is
    validated against the record layout; this is a raw escape hatch.
    """

    def __init__(self, conn: sqlite3.Connection, sql: str) -> None:
        self._conn = conn
        self.sql = sql

    @staticmethod
    def _bind(params: Sequence[Any]) -> Union[Sequence[Any], Mapping[str, Any]]:
        if len(params) == 1 and isinstance(params[0], (Mapping, list, tuple)):
            return params[0]
        return params

    def run(self, *params: Any) -> RunResult:
        cursor = self._conn.execute(self.sql, self._bind(params))
        return RunResult(changes=cursor.rowcount, last_insert_rowid=cursor.lastrowid)

    def get(self, *params: Any) -> Optional[Dict[str, Any]]:
        row = self._conn.execute(self.sql, self._bind(params)).fetchone()
        return dict(row) if row is not None else None

    def all(self, *params: Any) -> List[Dict[str, Any]]:
        return [dict(row) for row in self._conn.execute(self.sql, self._bind(params))]

    def iterate(self, *params: Any) -> Iterator[Dict[str, Any]]:
        for row in self._conn.execute(self.sql, self._bind(params)):
            yield dict(row)


class RecordStore:
    """
    Record store over one table of one SQLite file.

    Parameters
    ----------
    file_path : str | Path
        Backing SQLite file (":memory:" for a private in-memory database).
    table_name : str
        Table holding the records; must be a plain SQL identifier.
    options : ConnectionOptions | None
        How to open the file. Defaults to values from `Settings`.
    schema : Any
        Optional schema (mapping, `Schema`, or any object exposing
        `field_definitions()`); switches the store to hybrid mode.
    """

    def __init__(
        self,
        file_path: Union[str, Path],
        table_name: str,
        options: Optional[ConnectionOptions] = None,
        schema: Any = None,
    ) -> None:
        self.file_path = str(file_path)
        self.table_name = validate_identifier(table_name, "table")
        self.options = options or ConnectionOptions.from_settings()
        self._definitions: Optional[Dict[str, Any]] = resolve_definitions(schema)
        self._conn: Optional[sqlite3.Connection] = None
        self._strategy: Optional[AbstractStorageStrategy] = None

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None, schema: Any = None) -> "RecordStore":
        """Build a store for the file and table named in configuration."""
        settings = settings or get_settings()
        return cls(
            settings.db_path,
            settings.table_name,
            options=ConnectionOptions.from_settings(settings),
            schema=schema,
        )

    def __repr__(self) -> str:
        state = "connected" if self.is_connected else "disconnected"
        return (
            f"RecordStore(file_path={self.file_path!r}, table_name={self.table_name!r}, "
            f"mode={self.mode.value}, {state})"
        )

    # --- Schema and state -----------------------------------------------------------
    def set_schema(self, schema: Any) -> None:
        """
        Attach a schema (or detach with None) before connecting.

        Raises SchemaLockedError while connected: the table layout is fixed
        for the lifetime of a connection.
        """
        if self._conn is not None:
            raise SchemaLockedError("Cannot change the schema of a connected store; disconnect first.")
        self._definitions = resolve_definitions(schema)

    @property
    def schema(self) -> Optional[Dict[str, Any]]:
        return dict(self._definitions) if self._definitions is not None else None

    @property
    def mode(self) -> StorageMode:
        return StorageMode.BLOB if self._definitions is None else StorageMode.HYBRID

    @property
    def db_type(self) -> str:
        return "sql" if self.mode is StorageMode.HYBRID else "nosql"

    @property
    def is_connected(self) -> bool:
        return self._conn is not None

    @property
    def connection(self) -> Optional[sqlite3.Connection]:
        """The underlying sqlite3 connection, or None when disconnected."""
        return self._conn

    @property
    def in_transaction(self) -> bool:
        return self._require_connection().in_transaction

    def _require_connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise NotConnectedError()
        return self._conn

    def _active_strategy(self) -> AbstractStorageStrategy:
        self._require_connection()
        assert self._strategy is not None
        return self._strategy

    @property
    def _table(self) -> str:
        return quote_identifier(self.table_name)

    # --- Lifecycle ------------------------------------------------------------------
    def connect(self) -> None:
        """
        Open the backing file and ensure the table and its indexes exist.

        Idempotent: connecting an already connected store does nothing, and
        re-running against an existing file never duplicates tables or indexes.
        """
        if self._conn is not None:
            return

        conn = open_connection(self.file_path, self.options)
        strategy = strategy_for(self._definitions)
        try:
            if not self.options.read_only:
                conn.execute(strategy.create_table_sql(self.table_name))
                for statement in index_statements(self.table_name):
                    conn.execute(statement)
                log.debug(
                    "Table ensured",
                    extra={"table": self.table_name, "mode": strategy.mode.value},
                )
        except Exception:
            conn.close()
            raise

        self._conn = conn
        self._strategy = strategy
        log.info(
            "Record store connected",
            extra={"path": self.file_path, "table": self.table_name, "mode": strategy.mode.value},
        )

    def disconnect(self) -> None:
        """Close the connection. Safe to call when already disconnected."""
        if self._conn is None:
            return
        conn, self._conn, self._strategy = self._conn, None, None
        conn.close()
        log.info("Record store disconnected", extra={"path": self.file_path, "table": self.table_name})

    def __enter__(self) -> "RecordStore":
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.disconnect()

    # --- CRUD -----------------------------------------------------------------------
    def insert(self, data: Mapping[str, Any]) -> Record:
        """
        Insert a new record and return it with `_id`, `_createdAt` and `_updatedAt`.

        Caller-supplied reserved fields are ignored.
        """
        conn = self._require_connection()
        strategy = self._active_strategy()

        now = utc_now_iso()
        record: Record = {
            **_user_fields(data),
            ID_FIELD: generate_id(),
            CREATED_AT_FIELD: now,
            UPDATED_AT_FIELD: now,
        }
        strategy.insert(conn, self.table_name, record)
        return dict(record)

    def query(self, query: Optional[Filter] = None) -> List[Record]:
        """
        Return every record whose fields strictly equal all filter entries.

        An empty filter matches everything. Records come back in insertion
        order.
        """
        conn = self._require_connection()
        strategy = self._active_strategy()
        criteria = dict(query or {})

        if ID_FIELD in criteria:
            record = self._lookup_by_id(criteria[ID_FIELD])
            return [record] if record is not None and matches_filter(record, criteria) else []

        records = strategy.select_all(conn, self.table_name)
        if not criteria:
            return list(records)
        return [record for record in records if matches_filter(record, criteria)]

    def query_one(self, query: Optional[Filter] = None) -> Optional[Record]:
        """
        Return the first matching record or None.

        Filters naming `_id` use the primary key instead of a table scan.
        """
        self._require_connection()
        criteria = dict(query or {})

        if ID_FIELD in criteria:
            record = self._lookup_by_id(criteria[ID_FIELD])
            if record is not None and matches_filter(record, criteria):
                return record
            return None

        results = self.query(criteria)
        return results[0] if results else None

    def _lookup_by_id(self, record_id: Any) -> Optional[Record]:
        # Ids are always strings; under strict equality nothing else can match.
        if not isinstance(record_id, str):
            return None
        return self._active_strategy().select_by_id(
            self._require_connection(), self.table_name, record_id
        )

    def update(self, query: Filter, data: Mapping[str, Any]) -> int:
        """
        Merge `data` over every matching record and return how many were written.

        `_id` and `_createdAt` are preserved, `_updatedAt` is refreshed. Rows
        are written one statement at a time; wrap the call in a transaction
        for all-or-nothing behavior.
        """
        conn = self._require_connection()
        strategy = self._active_strategy()
        patch = _user_fields(data)

        count = 0
        for existing in self.query(query):
            updated: Record = {**existing, **patch}
            updated[ID_FIELD] = existing[ID_FIELD]
            updated[CREATED_AT_FIELD] = existing[CREATED_AT_FIELD]
            updated[UPDATED_AT_FIELD] = utc_now_iso()
            if strategy.update_row(conn, self.table_name, updated) > 0:
                count += 1

        log.debug("Records updated", extra={"table": self.table_name, "count": count})
        return count

    def delete(self, query: Filter) -> int:
        """Delete every matching record by `_id` and return how many rows went away."""
        conn = self._require_connection()

        count = 0
        for record in self.query(query):
            cursor = conn.execute(
                f"DELETE FROM {self._table} WHERE {ID_FIELD} = ?", (record[ID_FIELD],)
            )
            count += cursor.rowcount

        log.debug("Records deleted", extra={"table": self.table_name, "count": count})
        return count

    def exists(self, query: Optional[Filter] = None) -> bool:
        return self.query_one(query) is not None

    def count(self, query: Optional[Filter] = None) -> int:
        conn = self._require_connection()
        if not query:
            row = conn.execute(f"SELECT COUNT(*) AS count FROM {self._table}").fetchone()
            return int(row["count"])
        return len(self.query(query))

    # Driver contract names.
    def set(self, data: Mapping[str, Any]) -> Record:
        return self.insert(data)

    def get(self, query: Optional[Filter] = None) -> List[Record]:
        return self.query(query)

    def get_one(self, query: Optional[Filter] = None) -> Optional[Record]:
        return self.query_one(query)

    # --- Table maintenance ----------------------------------------------------------
    def clear(self) -> None:
        """Delete all rows; the table and its indexes stay."""
        self._require_connection().execute(f"DELETE FROM {self._table}")

    def drop(self) -> None:
        """Drop the table together with its indexes. All data is lost."""
        self._require_connection().execute(f"DROP TABLE IF EXISTS {self._table}")
        log.info("Table dropped", extra={"table": self.table_name})

    def vacuum(self) -> None:
        self._require_connection().execute("VACUUM")

    def analyze(self) -> None:
        self._require_connection().execute("ANALYZE")

    # --- Transactions ---------------------------------------------------------------
    def begin_transaction(self) -> None:
        self._require_connection().execute("BEGIN")

    def commit(self) -> None:
        self._require_connection().execute("COMMIT")

    def rollback(self) -> None:
        self._require_connection().execute("ROLLBACK")

    @contextmanager
    def transaction(self) -> Iterator["RecordStore"]:
        """
        Run a block inside BEGIN/COMMIT, rolling back if it raises.

        Example
        -------
            with store.transaction():
                store.update({"team": "a"}, {"team": "b"})
                store.delete({"team": "c"})
        """
        self.begin_transaction()
        try:
            yield self
        except BaseException:
            self.rollback()
            raise
        else:
            self.commit()

    # --- Raw access -----------------------------------------------------------------
    def execute_raw(self, sql: str, params: Union[Sequence[Any], Mapping[str, Any]] = ()) -> sqlite3.Cursor:
        """
        Execute one statement directly against the engine.

        WARNING: bypasses record encoding and every store invariant; engine
        errors propagate unchanged.
        """
        return self._require_connection().execute(sql, params)

    def execute_script(self, sql: str) -> None:
        """Execute a multi-statement SQL script directly against the engine."""
        self._require_connection().executescript(sql)

    def prepare(self, sql: str) -> PreparedStatement:
        """
        Bind a statement to the current connection for repeated execution.

        WARNING: bypasses the record abstraction. The statement is only
        compiled on first execution, so syntax errors surface there.
        """
        return PreparedStatement(self._require_connection(), sql)


__all__ = ["RecordStore", "PreparedStatement", "RunResult"]
