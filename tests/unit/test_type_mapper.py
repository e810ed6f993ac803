from __future__ import annotations

import pytest

from recordstore.domain.models import FieldSpec, FieldType
from recordstore.domain.type_mapper import (
    BLOB,
    INTEGER,
    REAL,
    TEXT,
    is_boolean_type,
    map_type_to_sql,
    normalize_type_tag,
)


@pytest.mark.parametrize(
    ("descriptor", "expected"),
    [
        ("STRING", TEXT),
        ("NUMBER", REAL),
        ({"type": "NUMBER_INT"}, INTEGER),
        ("BOOLEAN", INTEGER),
        ("UNKNOWN_TAG", TEXT),
        ("DATE", TEXT),
        ("BLOB", BLOB),
        ("BUFFER", BLOB),
    ],
)
def test_documented_mappings(descriptor, expected) -> None:
    assert map_type_to_sql(descriptor) == expected


@pytest.mark.parametrize("tag", ["text", "Email", "url", "UUID", "varchar", "EMAIL_STRING"])
def test_text_family_tags_map_to_text(tag: str) -> None:
    assert map_type_to_sql(tag) == TEXT


def test_matching_is_case_insensitive_substring() -> None:
    assert map_type_to_sql("number_integer") == INTEGER
    assert map_type_to_sql("BigNumber") == REAL
    assert map_type_to_sql("datetime") == TEXT


def test_text_markers_win_over_later_rules() -> None:
    # "STRING" is checked before "NUMBER".
    assert map_type_to_sql("NUMBER_STRING") == TEXT


def test_structured_descriptors_are_unwrapped() -> None:
    assert map_type_to_sql(FieldSpec(type=FieldType.NUMBER_INT, required=True)) == INTEGER
    assert map_type_to_sql({"type": FieldType.BOOLEAN, "default": False}) == INTEGER
    assert map_type_to_sql(FieldType.BLOB) == BLOB


def test_enum_members_normalize_to_their_value() -> None:
    assert normalize_type_tag(FieldType.NUMBER_INT) == "NUMBER_INT"


def test_non_string_descriptors_fall_back_to_text() -> None:
    assert map_type_to_sql(None) == TEXT
    assert map_type_to_sql(42) == TEXT
    assert map_type_to_sql({"required": True}) == TEXT


def test_is_boolean_type() -> None:
    assert is_boolean_type("BOOLEAN")
    assert is_boolean_type({"type": "boolean"})
    assert is_boolean_type(FieldSpec(type=FieldType.BOOLEAN))
    assert not is_boolean_type("NUMBER_INT")
