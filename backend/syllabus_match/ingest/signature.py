"""Canonical signatures for syllabus records."""

from __future__ import annotations

from syllabus_match.models.entities import UNKNOWN, Signature, SyllabusRecord
from syllabus_match.utils.ids import new_id
from syllabus_match.utils.text import alnum_lower
from syllabus_match.utils.time import now_ms

SIGNATURE_FIELDS = ("course_code", "course_title", "semester", "year", "university")


def signature_text(record: SyllabusRecord) -> str:
    """Pipe-joined, lowercase, alphanumeric-only view of the identity fields."""
    return "|".join(_token(getattr(record, name)) for name in SIGNATURE_FIELDS)


def build_signature(record: SyllabusRecord, owner_id: str) -> Signature:
    """Derive a fresh :class:`Signature` from an extracted record."""
    return Signature(
        id=new_id("sig"),
        course_code=record.course_code or UNKNOWN,
        course_title=record.course_title or UNKNOWN,
        semester=record.semester or UNKNOWN,
        year=record.year or UNKNOWN,
        university=record.university or UNKNOWN,
        signature_text=signature_text(record),
        owner_id=owner_id,
        created_at=now_ms(),
    )


def _token(value: str | None) -> str:
    # A value with no alphanumerics carries no identity.
    return alnum_lower(value or "") or UNKNOWN


__all__ = ["build_signature", "signature_text", "SIGNATURE_FIELDS"]
