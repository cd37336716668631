"""Tests for the recommendation policy."""

from __future__ import annotations

import pytest

from syllabus_match.matching.hybrid import FUZZY_REASON, recommend
from syllabus_match.models.entities import MatchCandidate, Signature


def _candidate(sig_id: str, similarity: float, method: str, exact: bool = False) -> MatchCandidate:
    signature = Signature(
        id=sig_id,
        course_code="CS101",
        course_title="Intro",
        semester="fall",
        year="2024",
        university="Springfield University",
        signature_text="cs101|intro|fall|2024|springfielduniversity",
        owner_id="owner",
        created_at=0,
    )
    return MatchCandidate(signature=signature, similarity=similarity, method=method, reason="r", exact_offering=exact)


@pytest.mark.parametrize(
    ("similarity", "expected"),
    [(0.85, "join"), (0.8, "join"), (0.79, "confirm"), (0.65, "confirm")],
)
def test_semantic_threshold(similarity: float, expected: str) -> None:
    best, recommendation = recommend([], [_candidate("s1", similarity, "semantic")])
    assert recommendation == expected
    assert best is not None and best.similarity == similarity


def test_top_semantic_wins_over_fuzzy() -> None:
    fuzzy = [_candidate("f1", 0.9, "fuzzy")]
    semantic = [_candidate("s1", 0.9, "semantic"), _candidate("s2", 0.7, "semantic")]
    best, recommendation = recommend(fuzzy, semantic)
    assert recommendation == "join"
    assert best is semantic[0]


def test_fuzzy_only_asks_for_confirmation() -> None:
    best, recommendation = recommend([_candidate("f1", 0.9, "fuzzy")], [])
    assert recommendation == "confirm"
    assert best is not None
    assert best.signature.id == "f1"
    assert best.similarity == 0.7
    assert best.reason == FUZZY_REASON
    assert best.method == "fuzzy"


def test_exact_offering_joins() -> None:
    exact = _candidate("f2", 1.0, "fuzzy", exact=True)
    best, recommendation = recommend([_candidate("f1", 1.0, "fuzzy"), exact], [_candidate("s1", 0.62, "semantic")])
    assert recommendation == "join"
    assert best is exact


def test_nothing_matched_creates() -> None:
    assert recommend([], []) == (None, "create")


def test_custom_thresholds() -> None:
    _, recommendation = recommend([], [_candidate("s1", 0.85, "semantic")], join_threshold=0.9)
    assert recommendation == "confirm"
    best, _ = recommend([_candidate("f1", 0.95, "fuzzy")], [], fuzzy_similarity=0.5)
    assert best is not None and best.similarity == 0.5
