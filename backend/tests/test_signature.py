"""Tests for signature building."""

from __future__ import annotations

from syllabus_match.ingest.signature import build_signature
from syllabus_match.models.entities import SyllabusRecord


def _record(**fields) -> SyllabusRecord:
    return SyllabusRecord(raw_text=fields.pop("raw_text", ""), extracted_at=0, **fields)


def test_signature_text_is_normalized() -> None:
    record = _record(
        course_code="CS101",
        course_title="Intro to C.S. (Honors)",
        semester="fall",
        year="2024",
        university="Springfield University",
    )
    signature = build_signature(record, owner_id="user-1")
    assert signature.signature_text == "cs101|introtocshonors|fall|2024|springfielduniversity"
    assert signature.course_title == "Intro to C.S. (Honors)"
    assert signature.owner_id == "user-1"
    assert signature.id.startswith("sig_")


def test_missing_fields_become_unknown() -> None:
    signature = build_signature(_record(course_code="MATH221"), owner_id="u")
    assert signature.signature_text == "math221|unknown|unknown|unknown|unknown"
    assert signature.university == "unknown"
    assert signature.offering_key is None
    assert signature.group_key is None


def test_signature_is_deterministic_across_raw_text() -> None:
    fields = dict(course_code="CS101", course_title="Intro", semester="spring", year="2025", university="MIT")
    first = build_signature(_record(raw_text="one upload", **fields), owner_id="a")
    second = build_signature(_record(raw_text="a different upload", **fields), owner_id="b")
    assert first.signature_text == second.signature_text
    assert first.id != second.id


def test_instructor_is_not_part_of_signature() -> None:
    base = dict(course_code="CS101", semester="fall", year="2024", university="Springfield University")
    first = build_signature(_record(instructor="Jane Smith", **base), owner_id="a")
    second = build_signature(_record(instructor="Bob Jones", **base), owner_id="b")
    assert first.signature_text == second.signature_text


def test_offering_key_and_group_key() -> None:
    signature = build_signature(
        _record(course_code="CS101", semester="fall", year="2024", university="Springfield University"),
        owner_id="u",
    )
    assert signature.offering_key == "cs101-springfielduniversity-fall-2024"
    assert signature.group_key == "group-cs101-springfielduniversity-fall-2024"


def test_punctuation_only_value_is_unknown() -> None:
    signature = build_signature(_record(course_title="---"), owner_id="u")
    assert signature.tokens[1] == "unknown"
