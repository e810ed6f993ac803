"""
Domain models for the hybrid record store.

Defines the field-type vocabulary, the structured field descriptor, the
schema wrapper, and the normalization that turns any accepted schema
collaborator into one ordered mapping of field name to type descriptor.
"""
from __future__ import annotations

import re
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Protocol, Union, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field, field_validator

from recordstore.errors import InvalidIdentifierError, SchemaError

ID_FIELD = "_id"
CREATED_AT_FIELD = "_createdAt"
UPDATED_AT_FIELD = "_updatedAt"
EXTRAS_COLUMN = "_extras"
DATA_COLUMN = "_data"

# Fields the store owns; callers can never set them.
RESERVED_FIELDS = frozenset({ID_FIELD, CREATED_AT_FIELD, UPDATED_AT_FIELD})
INTERNAL_COLUMNS = frozenset({EXTRAS_COLUMN, DATA_COLUMN})

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

Record = Dict[str, Any]
Filter = Mapping[str, Any]


class FieldType(str, Enum):
    """Known type tags. Any other string is accepted and mapped to TEXT."""

    STRING = "STRING"
    NUMBER = "NUMBER"
    NUMBER_INT = "NUMBER_INT"
    BOOLEAN = "BOOLEAN"
    DATE = "DATE"
    BLOB = "BLOB"


class StorageMode(str, Enum):
    """How records are laid out in the table."""

    BLOB = "blob"
    HYBRID = "hybrid"


class FieldSpec(BaseModel):
    """
    Structured type descriptor: a `type` tag plus free-form metadata.

    Only `type` is interpreted by the store; the remaining attributes are
    carried for higher layers (validation, documentation).
    """

    type: Union[FieldType, str]
    required: bool = False
    default: Any = None
    description: Optional[str] = None

    model_config = ConfigDict(frozen=True, extra="allow")


TypeDescriptor = Union[FieldType, FieldSpec, str, Mapping[str, Any]]


@runtime_checkable
class SchemaProvider(Protocol):
    """Anything that can hand the store its field definitions."""

    def field_definitions(self) -> Mapping[str, Any]:
        ...


class Schema(BaseModel):
    """
    Ordered field-name → type-descriptor mapping.

    Example
    -------
        Schema(definition={"name": FieldType.STRING, "age": "NUMBER_INT"})
    """

    definition: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @field_validator("definition")
    @classmethod
    def _check_field_names(cls, value: Dict[str, Any]) -> Dict[str, Any]:
        for name in value:
            validate_field_name(name)
        return value

    def field_definitions(self) -> Mapping[str, Any]:
        return dict(self.definition)


def validate_identifier(name: str, kind: str = "identifier") -> str:
    """Reject anything that cannot be used unquoted as a SQLite identifier."""
    if not isinstance(name, str) or not _IDENTIFIER_RE.match(name):
        raise InvalidIdentifierError(f"Invalid {kind} name: {name!r}")
    return name


def validate_field_name(name: str) -> str:
    validate_identifier(name, "field")
    if name in RESERVED_FIELDS or name in INTERNAL_COLUMNS:
        raise SchemaError(f"Field name {name!r} is reserved by the store")
    return name


def resolve_definitions(schema: Any) -> Optional[Dict[str, Any]]:
    """
    Normalize a schema collaborator into an ordered dict of field definitions.

    Accepts, in order of preference: None, an object implementing
    `field_definitions()`, an object exposing `get_definition()` /
    `getDefinition()` or a `definition` attribute, or a plain mapping.
    """
    if schema is None:
        return None

    if isinstance(schema, SchemaProvider):
        definitions = schema.field_definitions()
    elif callable(getattr(schema, "get_definition", None)):
        definitions = schema.get_definition()
    elif callable(getattr(schema, "getDefinition", None)):
        definitions = schema.getDefinition()
    elif isinstance(schema, Mapping):
        definitions = schema
    elif isinstance(getattr(schema, "definition", None), Mapping):
        definitions = schema.definition
    else:
        raise SchemaError(
            f"Unsupported schema object of type {type(schema).__name__}; "
            "expected a mapping or an object with field_definitions()"
        )

    if not isinstance(definitions, Mapping):
        raise SchemaError("Schema definitions must be a mapping of field name to type")

    resolved: Dict[str, Any] = {}
    for name, descriptor in definitions.items():
        resolved[validate_field_name(name)] = descriptor
    return resolved


__all__ = [
    "ID_FIELD",
    "CREATED_AT_FIELD",
    "UPDATED_AT_FIELD",
    "EXTRAS_COLUMN",
    "DATA_COLUMN",
    "RESERVED_FIELDS",
    "INTERNAL_COLUMNS",
    "Record",
    "Filter",
    "FieldType",
    "StorageMode",
    "FieldSpec",
    "TypeDescriptor",
    "SchemaProvider",
    "Schema",
    "validate_identifier",
    "validate_field_name",
    "resolve_definitions",
]
