"""Merge fuzzy and semantic results into a recommendation."""

from __future__ import annotations

from typing import Sequence

from syllabus_match.models.entities import MatchCandidate, Recommendation

FUZZY_REASON = "fuzzy string match"


def recommend(
    fuzzy_matches: Sequence[MatchCandidate],
    semantic_matches: Sequence[MatchCandidate],
    join_threshold: float = 0.8,
    fuzzy_similarity: float = 0.7,
) -> tuple[MatchCandidate | None, Recommendation]:
    """Pick the best match and what to do with it.

    Rules, first hit wins:

    1. A fuzzy match on the same fully-known offering joins outright.
    2. The top semantic match joins at ``join_threshold`` or above and is
       otherwise offered for confirmation.
    3. The top fuzzy match is offered for confirmation with a fixed
       representative similarity; token overlap alone never auto-joins.
    4. Nothing matched: create a new group.
    """
    exact = next((match for match in fuzzy_matches if match.exact_offering), None)
    if exact is not None:
        return exact, "join"
    if semantic_matches:
        best = semantic_matches[0]
        return best, "join" if best.similarity >= join_threshold else "confirm"
    if fuzzy_matches:
        top = fuzzy_matches[0]
        wrapped = MatchCandidate(
            signature=top.signature,
            similarity=fuzzy_similarity,
            method="fuzzy",
            reason=FUZZY_REASON,
        )
        return wrapped, "confirm"
    return None, "create"


__all__ = ["recommend", "FUZZY_REASON"]
