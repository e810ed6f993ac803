"""
Strategies package for the hybrid record store.

Re-exports the strategy interfaces and both concrete storage layouts so
downstream code can import from `recordstore.strategies` directly.
"""

from typing import Any, Mapping, Optional

from recordstore.strategies.abstract import (
    AbstractStorageStrategy,
    StorageStrategy,
    index_statements,
    quote_identifier,
)
from recordstore.strategies.blob import BlobStrategy
from recordstore.strategies.hybrid import HybridStrategy


def strategy_for(definitions: Optional[Mapping[str, Any]]) -> AbstractStorageStrategy:
    """Pick the layout for a table: hybrid when a schema is attached, blob otherwise."""
    if definitions is None:
        return BlobStrategy()
    return HybridStrategy(definitions)


__all__ = [
    # Abstracts
    "AbstractStorageStrategy",
    "StorageStrategy",
    "index_statements",
    "quote_identifier",
    # Concrete strategies
    "BlobStrategy",
    "HybridStrategy",
    "strategy_for",
]
