"""Rule-based extraction of course fields from syllabus text.

Every field has an ordered list of case-insensitive patterns, strongest first.
The first pattern producing a non-empty value fills the field and weaker
patterns are not consulted. Missing fields are an expected outcome and only
lower the record's confidence.
"""

from __future__ import annotations

import re
from typing import Callable, Sequence

from syllabus_match.models.entities import SyllabusRecord
from syllabus_match.utils.text import normalize
from syllabus_match.utils.time import now_ms

_FLAGS = re.IGNORECASE | re.MULTILINE
# Institution names are matched case-sensitively so leading prose is left out.
_NAME_FLAGS = re.MULTILINE

_EMAIL = r"[a-z0-9._%+-]+@[a-z0-9.-]+\.[a-z]{2,}"
_SEASONS = r"fall|spring|summer|winter|autumn"
_NAME_CHARS = r"[^,;:\n\r\d]"

# Capitalised sentence words that never begin an institution name.
_LEAD_WORDS = r"Welcome|At|To|From|In|Of|For|And|Taught|This|Our|Your|See|Visit"
# One capitalised name word, e.g. "Springfield", "St.", "A&M", "O'Neill".
_PROPER = rf"(?!(?:{_LEAD_WORDS})\b)[A-Z][\w.&'-]*"
_PROPER_TAIL = rf"(?:[ \t]+(?:(?:of|at|and|the)[ \t]+)?{_PROPER}){{0,3}}"

# Prefixes that precede a number without being a course code: dates, terms, rooms.
_CODE_STOPWORDS = (
    "fall|room|page|year|term|week|unit|suite|ext|box|ste|in|on|at|of|to|by|for|is|and|the"
    "|from|as|or|due|since|rev"
    "|jan|feb|mar|apr|may|jun|june|jul|july|aug|sep|sept|oct|nov|dec"
    "|mon|tue|tues|wed|thu|thur|fri|sat|sun"
)
# Abbreviated terms such as "SP2025" or "SU-2025"; read by the semester rules instead.
_TERM_TOKEN = r"(?:su|sp|f|s|w|a)['\-]?(?:19|20)\d{2}\b"

COURSE_CODE_PATTERNS: Sequence[re.Pattern[str]] = (
    re.compile(
        r"\b(?:course\s+code|course\s+number|catalog\s+number|subject\s+code)\s*[:#]?\s*"
        r"([a-z]{2,4}[-_ \t]?\d{3,4}[a-z]?)\b",
        _FLAGS,
    ),
    re.compile(
        rf"\b(?!(?:{_CODE_STOPWORDS})[-_ \t]?\d)(?!{_TERM_TOKEN})([a-z]{{2,4}}[-_ \t]?\d{{3,4}}[a-z]?)\b",
        _FLAGS,
    ),
    re.compile(
        r"\b((?:csci|cse|cs|math|engl|eng|bio|chem|phys|econ|hist|stat|psych)[-_ \t]?\d{2,4}[a-z]?)\b",
        _FLAGS,
    ),
)

COURSE_TITLE_PATTERNS: Sequence[re.Pattern[str]] = (
    re.compile(r"\b(?:course\s+)?title[ \t]*[:\-][ \t]*([^\n\r]+)", _FLAGS),
    re.compile(r"\b((?:introduction\s+to|fundamentals\s+of|principles\s+of)[ \t]+[^\n\r]+)", _FLAGS),
    re.compile(r"^[ \t]*([a-z][a-z \t]*\b(?:introduction|fundamentals|principles|basics|overview))\b", _FLAGS),
)

# A label followed by another label ("Instructor Email:", "Professor Office Hours") names no one.
INSTRUCTOR_PATTERNS: Sequence[re.Pattern[str]] = (
    re.compile(
        r"\b(?:instructor|professor|teacher|lecturer)(?:[ \t]+name)?\b[ \t]*[:\-]?[ \t]*"
        r"(?!(?:e-?mail|office|hours|phone|contact)\b)([^\s@,(:][^\n\r@,(]*)",
        _FLAGS,
    ),
    re.compile(rf"\b([a-z]+[ \t]+[a-z]+)[ \t]*\([ \t]*{_EMAIL}[ \t]*\)", _FLAGS),
    re.compile(rf"\b([a-z]+[ \t]+[a-z]+)[ \t]*<?{_EMAIL}", _FLAGS),
)

EMAIL_PATTERNS: Sequence[re.Pattern[str]] = (re.compile(rf"({_EMAIL})", _FLAGS),)

# "su" precedes "s" so summer is never read as spring.
SEMESTER_PATTERNS: Sequence[re.Pattern[str]] = (
    re.compile(rf"\b({_SEASONS})[ \t,]*((?:19|20)\d{{2}})\b", _FLAGS),
    re.compile(r"\b(su|sp|f|s|w|a)['\-]?((?:19|20)\d{2})\b", _FLAGS),
    re.compile(rf"\b(?:semester|term)\b[ \t]*[:\-]?[ \t]*({_SEASONS})\b", _FLAGS),
)

YEAR_PATTERNS: Sequence[re.Pattern[str]] = (
    re.compile(r"\b(?:academic\s+)?year\b[ \t]*[:\-]?[ \t]*((?:19|20)\d{2})\b", _FLAGS),
    re.compile(r"\b((?:19|20)\d{2})\b", _FLAGS),
)

UNIVERSITY_PATTERNS: Sequence[re.Pattern[str]] = (
    re.compile(rf"\b((?i:university[ \t]+of)[ \t]+{_PROPER}{_PROPER_TAIL})", _NAME_FLAGS),
    re.compile(rf"\b((?:{_PROPER}[ \t]+){{1,4}}(?i:university))\b", _NAME_FLAGS),
    re.compile(rf"\b((?i:college[ \t]+of)[ \t]+{_PROPER}{_PROPER_TAIL})", _NAME_FLAGS),
    re.compile(rf"\b((?:{_PROPER}[ \t]+){{1,4}}(?i:college))\b", _NAME_FLAGS),
)

DEPARTMENT_PATTERNS: Sequence[re.Pattern[str]] = (
    re.compile(rf"\b(?:department|dept\.?|school|division)[ \t]+of[ \t]+({_NAME_CHARS}+)", _FLAGS),
    re.compile(rf"\b((?:{_PROPER}[ \t]+){{1,4}}(?i:department))\b", _NAME_FLAGS),
    re.compile(rf"\b((?:{_PROPER}[ \t]+){{1,4}}(?i:school))\b", _NAME_FLAGS),
)

SEMESTER_ALIASES = {
    "fall": "fall",
    "spring": "spring",
    "summer": "summer",
    "winter": "winter",
    "autumn": "autumn",
    "f": "fall",
    "s": "spring",
    "sp": "spring",
    "su": "summer",
    "w": "winter",
    "a": "autumn",
}

_STRIP_CHARS = " \t-–:;,.|()[]\"'"
_MAX_VALUE_LEN = 120


def extract(raw_text: str) -> SyllabusRecord:
    """Extract a :class:`SyllabusRecord` from plain syllabus text."""
    text = raw_text or ""
    semester, semester_year = _extract_semester(text)
    year = semester_year or _first_match(text, YEAR_PATTERNS)
    return SyllabusRecord(
        raw_text=raw_text,
        extracted_at=now_ms(),
        course_code=_first_match(text, COURSE_CODE_PATTERNS, _normalize_code),
        course_title=_first_match(text, COURSE_TITLE_PATTERNS),
        instructor=_first_match(text, INSTRUCTOR_PATTERNS),
        instructor_email=_first_match(text, EMAIL_PATTERNS, str.lower),
        semester=semester,  # type: ignore[arg-type]
        year=year,
        university=_first_match(text, UNIVERSITY_PATTERNS),
        department=_first_match(text, DEPARTMENT_PATTERNS),
    )


def _first_match(
    text: str,
    patterns: Sequence[re.Pattern[str]],
    transform: Callable[[str], str] | None = None,
) -> str | None:
    for pattern in patterns:
        match = pattern.search(text)
        if not match:
            continue
        value = _clean(match.group(1))
        if value:
            return transform(value) if transform else value
    return None


def _extract_semester(text: str) -> tuple[str | None, str | None]:
    for pattern in SEMESTER_PATTERNS:
        match = pattern.search(text)
        if not match:
            continue
        season = SEMESTER_ALIASES.get(match.group(1).lower())
        if season is None:
            continue
        year = match.group(2) if pattern.groups > 1 else None
        return season, year
    return None, None


def _normalize_code(value: str) -> str:
    return re.sub(r"[-_\s]", "", value).upper()


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    cleaned = normalize(value).strip(_STRIP_CHARS)
    if len(cleaned) > _MAX_VALUE_LEN:
        cleaned = cleaned[:_MAX_VALUE_LEN].rstrip()
    return cleaned or None


__all__ = ["extract", "SEMESTER_ALIASES"]
