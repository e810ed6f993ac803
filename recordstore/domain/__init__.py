"""
Domain package for the hybrid record store.

Exports the field-type vocabulary, schema normalization, the type mapper and
the record splitter/merger. Nothing in this package touches a connection.
"""

from recordstore.domain.models import (
    FieldSpec,
    FieldType,
    Filter,
    Record,
    Schema,
    SchemaProvider,
    StorageMode,
    resolve_definitions,
)
from recordstore.domain.records import matches_filter, merge_record, split_record
from recordstore.domain.type_mapper import is_boolean_type, map_type_to_sql

__all__ = [
    "FieldSpec",
    "FieldType",
    "Filter",
    "Record",
    "Schema",
    "SchemaProvider",
    "StorageMode",
    "resolve_definitions",
    "map_type_to_sql",
    "is_boolean_type",
    "split_record",
    "merge_record",
    "matches_filter",
]
