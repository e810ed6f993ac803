"""
Pytest configuration for the hybrid record store.

Provides fixtures for:
- Isolated settings (no `.env` or RECORDSTORE_* leakage between tests)
- Fast connection options for temporary files
- Connected blob-mode and hybrid-mode stores backed by `tmp_path`
"""

from __future__ import annotations

from pathlib import Path
from typing import Generator

import pytest

from recordstore.config import get_settings
from recordstore.domain.models import FieldType, Schema
from recordstore.infrastructure.db_factory import ConnectionOptions
from recordstore.store import RecordStore


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """
    Reset the cached Settings around every test so env overrides stay local.
    """
    for key in (
        "RECORDSTORE_DB_PATH",
        "RECORDSTORE_TABLE",
        "RECORDSTORE_TIMEOUT",
        "RECORDSTORE_BUSY_TIMEOUT_MS",
        "RECORDSTORE_JOURNAL_MODE",
        "RECORDSTORE_CONNECT_ATTEMPTS",
        "RECORDSTORE_CONNECT_BACKOFF_MAX",
        "LOG_LEVEL",
        "LOG_JSON",
    ):
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def fast_options() -> ConnectionOptions:
    """Connection options with a single open attempt and no backoff."""
    return ConnectionOptions(timeout=1.0, connect_attempts=1, connect_backoff_max=0.0)


@pytest.fixture()
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "records.db"


@pytest.fixture()
def user_schema() -> Schema:
    return Schema(
        definition={
            "name": FieldType.STRING,
            "age": FieldType.NUMBER_INT,
            "score": FieldType.NUMBER,
            "active": FieldType.BOOLEAN,
            "joined": FieldType.DATE,
            "avatar": FieldType.BLOB,
        }
    )


@pytest.fixture()
def blob_store(db_path: Path, fast_options: ConnectionOptions) -> Generator[RecordStore, None, None]:
    """Connected schema-less store."""
    store = RecordStore(db_path, "items", options=fast_options)
    store.connect()
    try:
        yield store
    finally:
        store.disconnect()


@pytest.fixture()
def hybrid_store(
    db_path: Path, fast_options: ConnectionOptions, user_schema: Schema
) -> Generator[RecordStore, None, None]:
    """Connected store with `user_schema` attached."""
    store = RecordStore(db_path, "users", options=fast_options, schema=user_schema)
    store.connect()
    try:
        yield store
    finally:
        store.disconnect()


@pytest.fixture(params=["blob", "hybrid"])
def any_store(request: pytest.FixtureRequest) -> RecordStore:
    """Run a test once per storage mode."""
    return request.getfixturevalue(f"{request.param}_store")
