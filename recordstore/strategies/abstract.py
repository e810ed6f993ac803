"""
Storage strategy interfaces for the hybrid record store.

A strategy owns the table layout and the row <-> record encoding for one
storage mode. The store picks one at connect time (blob when no schema is
attached, hybrid otherwise) and keeps connection handling, ids, timestamps
and filtering to itself.
"""

from __future__ import annotations

import abc
import sqlite3
from typing import Any, Iterator, List, Optional, Protocol, runtime_checkable

from recordstore.domain.models import (
    CREATED_AT_FIELD,
    ID_FIELD,
    UPDATED_AT_FIELD,
    Record,
    StorageMode,
)


def quote_identifier(name: str) -> str:
    """Double-quote an identifier so keywords ("order", "group") stay usable as names."""
    return '"' + name.replace('"', '""') + '"'


def index_statements(table: str) -> List[str]:
    """DDL for the non-unique timestamp indexes every table carries."""
    quoted = quote_identifier(table)
    return [
        f"CREATE INDEX IF NOT EXISTS {quote_identifier(f'idx_{table}_{column}')} "
        f"ON {quoted}({column})"
        for column in (CREATED_AT_FIELD, UPDATED_AT_FIELD)
    ]


@runtime_checkable
class StorageStrategy(Protocol):
    """
    Common interface both storage modes implement.

    Attributes
    ----------
    mode : StorageMode
        Which layout this strategy writes.
    """

    mode: StorageMode

    def create_table_sql(self, table: str) -> str:
        ...

    def insert(self, conn: sqlite3.Connection, table: str, record: Record) -> None:
        ...

    def update_row(self, conn: sqlite3.Connection, table: str, record: Record) -> int:
        ...

    def select_all(self, conn: sqlite3.Connection, table: str) -> Iterator[Record]:
        ...

    def select_by_id(
        self, conn: sqlite3.Connection, table: str, record_id: Any
    ) -> Optional[Record]:
        ...


class AbstractStorageStrategy(abc.ABC):
    """
    ABC helper carrying the read paths shared by both layouts.

    Subclasses set `mode`, provide the table DDL, the write statements and
    `row_to_record`.
    """

    mode: StorageMode

    @abc.abstractmethod
    def create_table_sql(self, table: str) -> str:  # pragma: no cover - interface only
        raise NotImplementedError

    @abc.abstractmethod
    def insert(self, conn: sqlite3.Connection, table: str, record: Record) -> None:  # pragma: no cover
        raise NotImplementedError

    @abc.abstractmethod
    def update_row(self, conn: sqlite3.Connection, table: str, record: Record) -> int:  # pragma: no cover
        raise NotImplementedError

    @abc.abstractmethod
    def row_to_record(self, row: sqlite3.Row) -> Record:  # pragma: no cover
        raise NotImplementedError

    def select_columns(self) -> str:
        return "*"

    def select_all(self, conn: sqlite3.Connection, table: str) -> Iterator[Record]:
        cursor = conn.execute(
            f"SELECT {self.select_columns()} FROM {quote_identifier(table)} ORDER BY rowid"
        )
        for row in cursor:
            yield self.row_to_record(row)

    def select_by_id(
        self, conn: sqlite3.Connection, table: str, record_id: Any
    ) -> Optional[Record]:
        row = conn.execute(
            f"SELECT {self.select_columns()} FROM {quote_identifier(table)} WHERE {ID_FIELD} = ?",
            (record_id,),
        ).fetchone()
        return self.row_to_record(row) if row is not None else None


__all__ = [
    "StorageStrategy",
    "AbstractStorageStrategy",
    "quote_identifier",
    "index_statements",
]
