"""Internal dataclasses representing extracted and persisted entities."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Literal, Mapping

Semester = Literal["fall", "spring", "summer", "winter", "autumn"]
MatchMethod = Literal["fuzzy", "semantic"]
Recommendation = Literal["join", "create", "confirm"]

UNKNOWN = "unknown"

# Points per non-null field; course code and university identify an offering best.
CONFIDENCE_WEIGHTS: Mapping[str, float] = {
    "course_code": 1.5,
    "course_title": 1.0,
    "instructor": 1.0,
    "semester": 0.5,
    "year": 0.5,
    "university": 1.5,
}
CONFIDENCE_MAX = 6.0


@dataclass(slots=True, frozen=True)
class SyllabusRecord:
    """Fields extracted from one uploaded syllabus."""

    raw_text: str
    extracted_at: int
    course_code: str | None = None
    course_title: str | None = None
    instructor: str | None = None
    instructor_email: str | None = None
    semester: Semester | None = None
    year: str | None = None
    university: str | None = None
    department: str | None = None

    @property
    def confidence(self) -> float:
        score = sum(weight for name, weight in CONFIDENCE_WEIGHTS.items() if getattr(self, name))
        return min(score / CONFIDENCE_MAX, 1.0)

    def to_dict(self, include_raw_text: bool = False) -> dict[str, Any]:
        payload = asdict(self)
        if not include_raw_text:
            payload.pop("raw_text")
        payload["confidence"] = self.confidence
        return payload


@dataclass(slots=True, frozen=True)
class Signature:
    """Canonical identity of a course offering derived from a record."""

    id: str
    course_code: str
    course_title: str
    semester: str
    year: str
    university: str
    signature_text: str
    owner_id: str
    created_at: int

    @property
    def tokens(self) -> list[str]:
        return self.signature_text.split("|")

    @property
    def offering_key(self) -> str | None:
        """``code-university-semester-year`` when all four are known."""
        parts = self.tokens
        if len(parts) != 5:
            return None
        code, _title, semester, year, university = parts
        identity = (code, university, semester, year)
        if any(not value or value == UNKNOWN for value in identity):
            return None
        return "-".join(identity)

    @property
    def group_key(self) -> str | None:
        key = self.offering_key
        return f"group-{key}" if key else None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(slots=True, frozen=True)
class Embedding:
    """Unit-norm vector owned by exactly one signature."""

    id: str
    signature_id: str
    vector: tuple[float, ...]
    source_text: str
    metadata: dict[str, str]
    model: str
    created_at: int

    @property
    def dim(self) -> int:
        return len(self.vector)


@dataclass(slots=True)
class MatchCandidate:
    signature: Signature
    similarity: float
    method: MatchMethod
    reason: str
    exact_offering: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "signature": self.signature.to_dict(),
            "similarity": self.similarity,
            "method": self.method,
            "reason": self.reason,
            "exact_offering": self.exact_offering,
        }


@dataclass(slots=True)
class Decision:
    fuzzy_matches: list[MatchCandidate]
    semantic_matches: list[MatchCandidate]
    best_match: MatchCandidate | None
    recommendation: Recommendation
    needs_review: bool = False
    group_key: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "fuzzy_matches": [match.to_dict() for match in self.fuzzy_matches],
            "semantic_matches": [match.to_dict() for match in self.semantic_matches],
            "best_match": self.best_match.to_dict() if self.best_match else None,
            "recommendation": self.recommendation,
            "needs_review": self.needs_review,
            "group_key": self.group_key,
        }


@dataclass(slots=True)
class ProcessResult:
    """Everything produced for one upload."""

    record: SyllabusRecord
    signature: Signature
    embedding: Embedding
    decision: Decision = field(repr=False)


__all__ = [
    "Semester",
    "MatchMethod",
    "Recommendation",
    "UNKNOWN",
    "CONFIDENCE_WEIGHTS",
    "SyllabusRecord",
    "Signature",
    "Embedding",
    "MatchCandidate",
    "Decision",
    "ProcessResult",
]
