"""Pydantic DTOs exposed via API."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class MatchRequest(BaseModel):
    raw_text: str = Field(description="Plain text rendered from the uploaded syllabus")
    owner_id: str = Field(min_length=1, description="Uploading user")


class RecordResponse(BaseModel):
    course_code: str | None
    course_title: str | None
    instructor: str | None
    instructor_email: str | None
    semester: str | None
    year: str | None
    university: str | None
    department: str | None
    confidence: float
    extracted_at: int


class SignatureResponse(BaseModel):
    id: str
    course_code: str
    course_title: str
    semester: str
    year: str
    university: str
    signature_text: str
    owner_id: str
    created_at: int


class MatchCandidateResponse(BaseModel):
    signature: SignatureResponse
    similarity: float
    method: Literal["fuzzy", "semantic"]
    reason: str
    exact_offering: bool = False


class DecisionResponse(BaseModel):
    fuzzy_matches: list[MatchCandidateResponse]
    semantic_matches: list[MatchCandidateResponse]
    best_match: MatchCandidateResponse | None
    recommendation: Literal["join", "create", "confirm"]
    needs_review: bool
    group_key: str | None


class MatchResponse(BaseModel):
    record: RecordResponse
    signature: SignatureResponse
    decision: DecisionResponse


class RecentSignaturesResponse(BaseModel):
    total: int
    signatures: list[SignatureResponse]


__all__ = [
    "MatchRequest",
    "RecordResponse",
    "SignatureResponse",
    "MatchCandidateResponse",
    "DecisionResponse",
    "MatchResponse",
    "RecentSignaturesResponse",
]
