"""
Coroutine facade over `RecordStore` for async callers.

Every coroutine runs the synchronous operation to completion on the event
loop thread without awaiting anything in between, so two operations on one
store never interleave and no locking is needed. The facade exists to fit
callers that `await` their driver; it does not make SQLite non-blocking.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, List, Mapping, Optional, Union

from recordstore.domain.models import Filter, Record, StorageMode
from recordstore.infrastructure.db_factory import ConnectionOptions
from recordstore.store import PreparedStatement, RecordStore


class AsyncRecordStore:
    """
    Async twin of `RecordStore` exposing the driver contract as coroutines.

    Either wrap an existing store (`AsyncRecordStore(store)`) or build one
    with `AsyncRecordStore.open(path, table, ...)`.
    """

    def __init__(self, store: RecordStore) -> None:
        self.store = store

    @classmethod
    def open(
        cls,
        file_path: Union[str, Path],
        table_name: str,
        options: Optional[ConnectionOptions] = None,
        schema: Any = None,
    ) -> "AsyncRecordStore":
        return cls(RecordStore(file_path, table_name, options=options, schema=schema))

    @property
    def db_type(self) -> str:
        return self.store.db_type

    @property
    def mode(self) -> StorageMode:
        return self.store.mode

    @property
    def is_connected(self) -> bool:
        return self.store.is_connected

    def set_schema(self, schema: Any) -> None:
        self.store.set_schema(schema)

    async def connect(self) -> None:
        self.store.connect()

    async def disconnect(self) -> None:
        self.store.disconnect()

    async def __aenter__(self) -> "AsyncRecordStore":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.disconnect()

    async def set(self, data: Mapping[str, Any]) -> Record:
        return self.store.insert(data)

    async def get(self, query: Optional[Filter] = None) -> List[Record]:
        return self.store.query(query)

    async def get_one(self, query: Optional[Filter] = None) -> Optional[Record]:
        return self.store.query_one(query)

    async def update(self, query: Filter, data: Mapping[str, Any]) -> int:
        return self.store.update(query, data)

    async def delete(self, query: Filter) -> int:
        return self.store.delete(query)

    async def exists(self, query: Optional[Filter] = None) -> bool:
        return self.store.exists(query)

    async def count(self, query: Optional[Filter] = None) -> int:
        return self.store.count(query)

    async def clear(self) -> None:
        self.store.clear()

    async def drop(self) -> None:
        self.store.drop()

    async def vacuum(self) -> None:
        self.store.vacuum()

    async def analyze(self) -> None:
        self.store.analyze()

    # Transaction boundaries and raw access stay synchronous, as on the store.
    def begin_transaction(self) -> None:
        self.store.begin_transaction()

    def commit(self) -> None:
        self.store.commit()

    def rollback(self) -> None:
        self.store.rollback()

    def execute_raw(self, sql: str, params: Any = ()) -> Any:
        return self.store.execute_raw(sql, params)

    def prepare(self, sql: str) -> PreparedStatement:
        return self.store.prepare(sql)


__all__ = ["AsyncRecordStore"]
