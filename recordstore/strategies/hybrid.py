"""
Hybrid strategy: schema fields in typed columns, everything else in `_extras`.

Layout: `(_id TEXT PRIMARY KEY, <one column per schema field>, _extras TEXT,
_createdAt TEXT NOT NULL, _updatedAt TEXT NOT NULL)`, column types resolved by
the type mapper. The field definitions are fixed for the strategy's lifetime.
"""

from __future__ import annotations

import sqlite3
from typing import Any, Dict, Mapping

from recordstore.domain import codec
from recordstore.domain.models import (
    CREATED_AT_FIELD,
    EXTRAS_COLUMN,
    ID_FIELD,
    UPDATED_AT_FIELD,
    Record,
    StorageMode,
)
from recordstore.domain.records import merge_record, split_record, to_column_value
from recordstore.domain.type_mapper import map_type_to_sql
from recordstore.strategies.abstract import AbstractStorageStrategy, quote_identifier


class HybridStrategy(AbstractStorageStrategy):
    """Split records into typed columns plus a JSON extras payload."""

    mode: StorageMode = StorageMode.HYBRID

    def __init__(self, definitions: Mapping[str, Any]) -> None:
        self.definitions: Dict[str, Any] = dict(definitions)

    def column_types(self) -> Dict[str, str]:
        """Schema field name -> SQLite column type, in declaration order."""
        return {name: map_type_to_sql(descriptor) for name, descriptor in self.definitions.items()}

    def create_table_sql(self, table: str) -> str:
        lines = [f"{ID_FIELD} TEXT PRIMARY KEY"]
        lines.extend(
            f"{quote_identifier(name)} {sql_type}" for name, sql_type in self.column_types().items()
        )
        lines.append(f"{EXTRAS_COLUMN} TEXT")
        lines.append(f"{CREATED_AT_FIELD} TEXT NOT NULL")
        lines.append(f"{UPDATED_AT_FIELD} TEXT NOT NULL")
        body = ",\n    ".join(lines)
        return f"CREATE TABLE IF NOT EXISTS {quote_identifier(table)} (\n    {body}\n)"

    def insert(self, conn: sqlite3.Connection, table: str, record: Record) -> None:
        schema_fields, extra_fields = split_record(record, self.definitions)

        columns = [ID_FIELD, *schema_fields, EXTRAS_COLUMN, CREATED_AT_FIELD, UPDATED_AT_FIELD]
        values = [
            record[ID_FIELD],
            *(to_column_value(value, name) for name, value in schema_fields.items()),
            codec.dumps(extra_fields),
            record[CREATED_AT_FIELD],
            record[UPDATED_AT_FIELD],
        ]
        placeholders = ", ".join("?" for _ in columns)
        column_list = ", ".join(quote_identifier(column) for column in columns)
        conn.execute(
            f"INSERT INTO {quote_identifier(table)} ({column_list}) VALUES ({placeholders})",
            values,
        )

    def update_row(self, conn: sqlite3.Connection, table: str, record: Record) -> int:
        schema_fields, extra_fields = split_record(record, self.definitions)

        assignments = [f"{quote_identifier(name)} = ?" for name in schema_fields]
        assignments.append(f"{EXTRAS_COLUMN} = ?")
        assignments.append(f"{UPDATED_AT_FIELD} = ?")
        values = [
            *(to_column_value(value, name) for name, value in schema_fields.items()),
            codec.dumps(extra_fields),
            record[UPDATED_AT_FIELD],
            record[ID_FIELD],
        ]
        cursor = conn.execute(
            f"UPDATE {quote_identifier(table)} SET {', '.join(assignments)} WHERE {ID_FIELD} = ?",
            values,
        )
        return cursor.rowcount

    def row_to_record(self, row: sqlite3.Row) -> Record:
        native = {key: row[key] for key in row.keys()}
        return merge_record(native, native.get(EXTRAS_COLUMN), self.definitions)


__all__ = ["HybridStrategy"]
