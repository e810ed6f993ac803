"""
Blob (schema-less) strategy: one JSON document per row.

Layout: `(_id TEXT PRIMARY KEY, _data TEXT NOT NULL, _createdAt TEXT NOT NULL,
_updatedAt TEXT NOT NULL)`. `_data` holds the full logical record, reserved
fields included; the reserved columns are duplicated so they can be indexed.
"""

from __future__ import annotations

import sqlite3

from recordstore.domain import codec
from recordstore.domain.models import (
    CREATED_AT_FIELD,
    DATA_COLUMN,
    ID_FIELD,
    UPDATED_AT_FIELD,
    Record,
    StorageMode,
)
from recordstore.errors import ExtrasDecodeFailure
from recordstore.strategies.abstract import AbstractStorageStrategy, quote_identifier
from recordstore.utils.logging import get_logger

log = get_logger(__name__)


class BlobStrategy(AbstractStorageStrategy):
    """Serialize the whole record into `_data`."""

    mode: StorageMode = StorageMode.BLOB

    def create_table_sql(self, table: str) -> str:
        return (
            f"CREATE TABLE IF NOT EXISTS {quote_identifier(table)} (\n"
            f"    {ID_FIELD} TEXT PRIMARY KEY,\n"
            f"    {DATA_COLUMN} TEXT NOT NULL,\n"
            f"    {CREATED_AT_FIELD} TEXT NOT NULL,\n"
            f"    {UPDATED_AT_FIELD} TEXT NOT NULL\n"
            ")"
        )

    def select_columns(self) -> str:
        return f"{ID_FIELD}, {DATA_COLUMN}, {CREATED_AT_FIELD}, {UPDATED_AT_FIELD}"

    def insert(self, conn: sqlite3.Connection, table: str, record: Record) -> None:
        conn.execute(
            f"INSERT INTO {quote_identifier(table)} "
            f"({ID_FIELD}, {DATA_COLUMN}, {CREATED_AT_FIELD}, {UPDATED_AT_FIELD}) "
            "VALUES (?, ?, ?, ?)",
            (
                record[ID_FIELD],
                codec.dumps(record),
                record[CREATED_AT_FIELD],
                record[UPDATED_AT_FIELD],
            ),
        )

    def update_row(self, conn: sqlite3.Connection, table: str, record: Record) -> int:
        cursor = conn.execute(
            f"UPDATE {quote_identifier(table)} "
            f"SET {DATA_COLUMN} = ?, {UPDATED_AT_FIELD} = ? WHERE {ID_FIELD} = ?",
            (codec.dumps(record), record[UPDATED_AT_FIELD], record[ID_FIELD]),
        )
        return cursor.rowcount

    def row_to_record(self, row: sqlite3.Row) -> Record:
        try:
            record = codec.decode_mapping(row[DATA_COLUMN])
        except ExtrasDecodeFailure as exc:
            log.warning(
                "Ignoring undecodable record payload",
                extra={"record_id": row[ID_FIELD], "error": str(exc)},
            )
            record = {}
        # The indexed columns are authoritative for the reserved fields.
        record[ID_FIELD] = row[ID_FIELD]
        record[CREATED_AT_FIELD] = row[CREATED_AT_FIELD]
        record[UPDATED_AT_FIELD] = row[UPDATED_AT_FIELD]
        return record


__all__ = ["BlobStrategy"]
