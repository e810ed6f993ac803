"""
Utilities package for the hybrid record store.

Exports shared helpers for logging, identifiers and timestamps.
Keep this package lightweight and free of storage-specific logic.
"""

from recordstore.utils.identifiers import generate_id, utc_now_iso
from recordstore.utils.logging import JsonFormatter, configure_logging, get_logger

__all__ = [
    "configure_logging",
    "get_logger",
    "JsonFormatter",
    "generate_id",
    "utc_now_iso",
]
