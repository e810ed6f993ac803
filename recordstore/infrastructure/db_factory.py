"""
SQLite connection factory for the hybrid record store.

Centralizes how the backing file is opened: autocommit mode so that
transaction boundaries are explicit, `sqlite3.Row` rows, optional read-only
URI mode, and connection pragmas. Opening is retried with tenacity while the
file is locked or busy (another process holding a write lock during
creation); every other error surfaces immediately.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from recordstore.config import Settings, get_settings
from recordstore.utils.logging import get_logger

log = get_logger(__name__)

MEMORY_PATH = ":memory:"
_TRANSIENT_MARKERS = ("locked", "busy")


class ConnectionOptions(BaseModel):
    """
    Per-store options for opening the backing file.

    Attributes
    ----------
    timeout : float
        Seconds sqlite3 waits on a locked database before raising.
    read_only : bool
        Open the file with `mode=ro`; the file must already exist.
    busy_timeout_ms : int | None
        Value for `PRAGMA busy_timeout`; None leaves the engine default.
    journal_mode : str | None
        Value for `PRAGMA journal_mode` (e.g. "WAL"); None leaves it unchanged.
    check_same_thread : bool
        Passed through to `sqlite3.connect`.
    connect_attempts : int
        Total attempts when opening fails with a transient lock error.
    connect_backoff_max : float
        Upper bound in seconds for the exponential backoff between attempts.
    """

    timeout: float = 5.0
    read_only: bool = False
    busy_timeout_ms: Optional[int] = None
    journal_mode: Optional[str] = None
    check_same_thread: bool = True
    connect_attempts: int = Field(3, ge=1)
    connect_backoff_max: float = Field(2.0, ge=0)

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "ConnectionOptions":
        settings = settings or get_settings()
        return cls(
            timeout=settings.timeout_seconds,
            busy_timeout_ms=settings.busy_timeout_ms,
            journal_mode=settings.journal_mode,
            connect_attempts=max(1, settings.connect_attempts),
            connect_backoff_max=max(0.0, settings.connect_backoff_max),
        )


def _is_transient(exc: BaseException) -> bool:
    if not isinstance(exc, sqlite3.OperationalError):
        return False
    message = str(exc).lower()
    return any(marker in message for marker in _TRANSIENT_MARKERS)


def _database_target(path: str, read_only: bool) -> tuple[str, bool]:
    """Return the `database` argument for sqlite3.connect and whether it is a URI."""
    if read_only and path != MEMORY_PATH:
        return f"{Path(path).resolve().as_uri()}?mode=ro", True
    return path, False


def apply_pragmas(conn: sqlite3.Connection, options: ConnectionOptions, path: str) -> None:
    """Apply the connection pragmas requested in `options`."""
    if options.busy_timeout_ms is not None:
        conn.execute(f"PRAGMA busy_timeout={int(options.busy_timeout_ms)}")
    if options.journal_mode and path != MEMORY_PATH and not options.read_only:
        mode = conn.execute(f"PRAGMA journal_mode={options.journal_mode}").fetchone()[0]
        if str(mode).lower() != options.journal_mode.lower():
            log.warning(
                "Journal mode not applied",
                extra={"requested": options.journal_mode, "got": mode, "path": path},
            )


def _connect_once(path: str, options: ConnectionOptions) -> sqlite3.Connection:
    target, uri = _database_target(path, options.read_only)
    conn = sqlite3.connect(
        target,
        timeout=options.timeout,
        isolation_level=None,
        check_same_thread=options.check_same_thread,
        uri=uri,
    )
    try:
        conn.row_factory = sqlite3.Row
        apply_pragmas(conn, options, path)
    except Exception:
        conn.close()
        raise
    return conn


def open_connection(
    path: Union[str, Path], options: Optional[ConnectionOptions] = None
) -> sqlite3.Connection:
    """
    Open a configured connection to the SQLite file at `path`.

    Retries up to `options.connect_attempts` times with exponential backoff
    when the file is locked or busy.

    Raises
    ------
    sqlite3.OperationalError
        If the file cannot be opened, or stays locked after all attempts.
    """
    options = options or ConnectionOptions.from_settings()
    path = str(path)
    retryer = Retrying(
        stop=stop_after_attempt(options.connect_attempts),
        wait=wait_exponential(multiplier=0.1, max=options.connect_backoff_max),
        retry=retry_if_exception(_is_transient),
        before_sleep=before_sleep_log(log, logging.WARNING),
        reraise=True,
    )
    return retryer(_connect_once, path, options)


__all__ = [
    "MEMORY_PATH",
    "ConnectionOptions",
    "apply_pragmas",
    "open_connection",
]
