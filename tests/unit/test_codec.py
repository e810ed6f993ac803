from __future__ import annotations

import json
from datetime import date, datetime, timezone

import pytest

from recordstore.domain import codec
from recordstore.errors import ExtrasDecodeFailure


def test_bytes_survive_encoding() -> None:
    payload = codec.dumps({"avatar": b"\x00\xffpng", "nested": {"raw": bytearray(b"ab")}})

    assert json.loads(payload)["avatar"] == {codec.BYTES_KEY: "AP9wbmc="}
    decoded = codec.loads(payload)
    assert decoded["avatar"] == b"\x00\xffpng"
    assert decoded["nested"]["raw"] == b"ab"


def test_dates_are_written_as_iso_strings() -> None:
    moment = datetime(2024, 5, 6, 7, 8, 9, tzinfo=timezone.utc)
    decoded = codec.loads(codec.dumps({"at": moment, "day": date(2024, 1, 2)}))
    assert decoded == {"at": "2024-05-06T07:08:09+00:00", "day": "2024-01-02"}


def test_unserializable_values_raise() -> None:
    with pytest.raises(TypeError):
        codec.dumps({"obj": object()})


def test_objects_with_extra_keys_are_not_mistaken_for_bytes() -> None:
    value = {codec.BYTES_KEY: "AA==", "other": 1}
    assert codec.loads(codec.dumps(value)) == value


@pytest.mark.parametrize("payload", [None, "", b""])
def test_decode_mapping_treats_empty_payload_as_empty(payload) -> None:
    assert codec.decode_mapping(payload) == {}


@pytest.mark.parametrize("payload", ["{not json", "[1, 2]", "42", '"text"'])
def test_decode_mapping_rejects_corrupt_or_non_object_payloads(payload: str) -> None:
    with pytest.raises(ExtrasDecodeFailure):
        codec.decode_mapping(payload)


@pytest.mark.parametrize(
    "value",
    [
        {codec.BYTES_KEY: "aGk="},
        {codec.BYTES_KEY: "not base64!"},
        {codec.BYTES_KEY: 7},
        {codec.ESCAPE_KEY: {"x": 1}},
        {codec.ESCAPE_KEY: {codec.BYTES_KEY: "aGk="}},
    ],
)
def test_user_objects_shaped_like_tags_round_trip(value) -> None:
    record = {"meta": value, "list": [value]}
    assert codec.loads(codec.dumps(record)) == record
    assert codec.decode_mapping(codec.dumps(record)) == record


def test_tag_shaped_objects_are_wrapped_on_encode() -> None:
    payload = json.loads(codec.dumps({"meta": {codec.BYTES_KEY: "aGk="}}))
    assert payload == {"meta": {codec.ESCAPE_KEY: {codec.BYTES_KEY: "aGk="}}}


def test_real_bytes_inside_tag_shaped_object_still_decode() -> None:
    record = {"meta": {codec.BYTES_KEY: b"raw"}}
    assert codec.loads(codec.dumps(record)) == record


def test_corrupt_encoded_bytes_are_reported() -> None:
    with pytest.raises(ExtrasDecodeFailure):
        codec.decode_mapping('{"raw":{"$bytes":"not base64!"}}')
