from __future__ import annotations

from collections import OrderedDict

import pytest
from pydantic import ValidationError

from recordstore.domain.models import (
    FieldSpec,
    FieldType,
    Schema,
    SchemaProvider,
    resolve_definitions,
    validate_identifier,
)
from recordstore.errors import InvalidIdentifierError, SchemaError


class _DefinitionHolder:
    """Schema object exposing its definition through an accessor."""

    def __init__(self, definition: dict) -> None:
        self._definition = definition

    def get_definition(self) -> dict:
        return self._definition


class _LegacyHolder:
    def getDefinition(self) -> dict:  # noqa: N802 - mirrors foreign schema objects
        return {"title": "STRING"}


class _AttributeHolder:
    definition = {"count": "NUMBER_INT"}


def test_none_means_no_schema() -> None:
    assert resolve_definitions(None) is None


def test_plain_mapping_keeps_declaration_order() -> None:
    resolved = resolve_definitions(OrderedDict([("z", "STRING"), ("a", "NUMBER")]))
    assert list(resolved) == ["z", "a"]


def test_schema_model_implements_field_definitions() -> None:
    schema = Schema(definition={"name": FieldType.STRING, "age": FieldSpec(type="NUMBER_INT")})

    assert isinstance(schema, SchemaProvider)
    assert resolve_definitions(schema) == {"name": FieldType.STRING, "age": FieldSpec(type="NUMBER_INT")}


@pytest.mark.parametrize(
    ("schema", "expected"),
    [
        (_DefinitionHolder({"flag": "BOOLEAN"}), {"flag": "BOOLEAN"}),
        (_LegacyHolder(), {"title": "STRING"}),
        (_AttributeHolder(), {"count": "NUMBER_INT"}),
    ],
)
def test_duck_typed_schema_objects(schema, expected) -> None:
    assert resolve_definitions(schema) == expected


def test_unsupported_schema_objects_are_rejected() -> None:
    with pytest.raises(SchemaError):
        resolve_definitions(42)


@pytest.mark.parametrize("name", ["_id", "_createdAt", "_updatedAt", "_extras", "_data"])
def test_reserved_names_cannot_be_schema_fields(name: str) -> None:
    with pytest.raises(SchemaError):
        resolve_definitions({name: "STRING"})


@pytest.mark.parametrize("name", ["has space", "1abc", "drop;table", ""])
def test_field_names_must_be_identifiers(name: str) -> None:
    with pytest.raises(InvalidIdentifierError):
        resolve_definitions({name: "STRING"})


def test_schema_model_validates_field_names() -> None:
    with pytest.raises(ValidationError):
        Schema(definition={"bad name": "STRING"})


def test_field_spec_keeps_extra_metadata() -> None:
    spec = FieldSpec(type=FieldType.STRING, required=True, max_length=30)
    assert spec.required is True
    assert spec.model_extra == {"max_length": 30}


def test_validate_identifier_accepts_plain_names() -> None:
    assert validate_identifier("users_2024") == "users_2024"
    with pytest.raises(ValueError):
        validate_identifier("users-2024", "table")
