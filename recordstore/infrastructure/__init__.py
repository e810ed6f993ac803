"""
Infrastructure package for the hybrid record store.

Centralizes database connectivity concerns (opening, pragmas, retries).
Keep this layer focused on I/O and resource management, decoupled from
record encoding and query logic.
"""

from recordstore.infrastructure.db_factory import (
    MEMORY_PATH,
    ConnectionOptions,
    apply_pragmas,
    open_connection,
)

__all__ = [
    "MEMORY_PATH",
    "ConnectionOptions",
    "apply_pragmas",
    "open_connection",
]
