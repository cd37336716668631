"""Token-set matching over signature text."""

from __future__ import annotations

from typing import Sequence

from syllabus_match.db.corpus import CorpusStore
from syllabus_match.models.entities import MatchCandidate, Signature


def jaccard(a: Signature, b: Signature) -> float:
    """``|A & B| / |A | B|`` over the ``|``-separated signature tokens."""
    if a.signature_text == b.signature_text:
        return 1.0
    set_a = set(a.tokens)
    set_b = set(b.tokens)
    union = set_a | set_b
    if not union:
        return 0.0
    return len(set_a & set_b) / len(union)


def signature_similarity(new_sig: Signature, existing: Signature) -> tuple[float, bool]:
    """Return ``(similarity, exact_offering)``.

    Two signatures naming the same fully-known offering (code, university,
    semester, year) score 1.0 whatever their titles say.
    """
    key = new_sig.offering_key
    if key is not None and key == existing.offering_key:
        return 1.0, True
    return jaccard(new_sig, existing), False


def rank_fuzzy(
    new_sig: Signature,
    window: Sequence[Signature],
    threshold: float = 0.8,
) -> list[MatchCandidate]:
    """Score ``window`` against ``new_sig``; best first, newer first on ties."""
    scored: list[MatchCandidate] = []
    for existing in window:
        if existing.id == new_sig.id:
            continue
        similarity, exact = signature_similarity(new_sig, existing)
        if similarity < threshold:
            continue
        reason = "same course offering" if exact else f"{round(similarity * 100)}% field overlap"
        scored.append(
            MatchCandidate(
                signature=existing,
                similarity=similarity,
                method="fuzzy",
                reason=reason,
                exact_offering=exact,
            )
        )
    scored.sort(key=lambda item: (item.similarity, item.signature.created_at), reverse=True)
    return scored


class FuzzyMatcher:
    """Compare a signature with the most recent ``window`` stored signatures.

    Only the recency window is scanned, so an offering whose last upload is
    older than ``window`` signatures will not be found. This bounds the cost
    of each upload and is a tunable trade-off.
    """

    def __init__(self, store: CorpusStore, window: int = 100) -> None:
        self.store = store
        self.window = window

    def find_fuzzy_matches(self, new_sig: Signature, threshold: float = 0.8) -> list[MatchCandidate]:
        recent = self.store.scan_recent("signature", self.window)
        return rank_fuzzy(new_sig, recent, threshold)


__all__ = ["jaccard", "signature_similarity", "rank_fuzzy", "FuzzyMatcher"]
