"""
Driver contract exposed to storage-agnostic data-access layers.

Any backend a higher layer can swap in implements this protocol; the
SQLite `RecordStore` is one such implementation and `AsyncRecordStore`
exposes the same operations as coroutines.
"""

from __future__ import annotations

from typing import Any, List, Optional, Protocol, runtime_checkable

from recordstore.domain.models import Filter, Record


@runtime_checkable
class Driver(Protocol):
    """
    Common interface for record drivers.

    Attributes
    ----------
    db_type : str
        "sql" when records are stored in typed columns, "nosql" for documents.
    """

    @property
    def db_type(self) -> str:
        ...

    def set_schema(self, schema: Any) -> None:
        ...

    def connect(self) -> None:
        ...

    def disconnect(self) -> None:
        ...

    def set(self, data: Record) -> Record:
        ...

    def get(self, query: Filter) -> List[Record]:
        ...

    def get_one(self, query: Filter) -> Optional[Record]:
        ...

    def update(self, query: Filter, data: Record) -> int:
        ...

    def delete(self, query: Filter) -> int:
        ...

    def exists(self, query: Filter) -> bool:
        ...

    def count(self, query: Filter) -> int:
        ...

    def clear(self) -> None:
        ...

    def drop(self) -> None:
        ...

    def vacuum(self) -> None:
        ...

    def analyze(self) -> None:
        ...

    def begin_transaction(self) -> None:
        ...

    def commit(self) -> None:
        ...

    def rollback(self) -> None:
        ...


__all__ = ["Driver"]
