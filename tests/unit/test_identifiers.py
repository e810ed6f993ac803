from __future__ import annotations

import re

from recordstore.utils.identifiers import generate_id, utc_now_iso

ID_PATTERN = re.compile(r"^\d{13,}_[0-9a-z]+$")
ISO_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$")
SAMPLE_SIZE = 2000


def test_generated_ids_have_millisecond_prefix_and_base36_suffix() -> None:
    assert ID_PATTERN.match(generate_id())


def test_generated_ids_are_unique() -> None:
    ids = {generate_id() for _ in range(SAMPLE_SIZE)}
    assert len(ids) == SAMPLE_SIZE


def test_timestamps_are_iso8601_utc_with_milliseconds() -> None:
    assert ISO_PATTERN.match(utc_now_iso())


def test_timestamps_sort_chronologically_as_strings() -> None:
    first = utc_now_iso()
    second = utc_now_iso()
    assert first <= second
