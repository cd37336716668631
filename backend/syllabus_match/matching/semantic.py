"""Cosine-similarity matching over stored embeddings."""

from __future__ import annotations

import math
from typing import Callable, Mapping, Sequence

from syllabus_match.core.errors import DimensionMismatch
from syllabus_match.core.logging import get_logger
from syllabus_match.db.corpus import CorpusStore
from syllabus_match.models.entities import Embedding, MatchCandidate, Signature

logger = get_logger(__name__)

SignatureResolver = Callable[[str], Signature | None]


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    if len(a) != len(b):
        raise DimensionMismatch(len(a), len(b))
    dot = 0.0
    norm_a = 0.0
    norm_b = 0.0
    for x, y in zip(a, b):
        dot += x * y
        norm_a += x * x
        norm_b += y * y
    if norm_a == 0 or norm_b == 0:
        return 0.0
    value = dot / (math.sqrt(norm_a) * math.sqrt(norm_b))
    return max(-1.0, min(1.0, value))


def match_reason(new_meta: Mapping[str, str], existing_meta: Mapping[str, str], similarity: float) -> str:
    """Explain a semantic match for display; never used for ranking."""
    reasons: list[str] = []
    if new_meta.get("course_code") == existing_meta.get("course_code"):
        reasons.append("Same course code")
    if new_meta.get("university") == existing_meta.get("university"):
        reasons.append("Same university")
    if new_meta.get("semester") == existing_meta.get("semester"):
        reasons.append("Same semester")
    if new_meta.get("year") == existing_meta.get("year"):
        reasons.append("Same year")
    title_a = (new_meta.get("course_title") or "").lower()
    title_b = (existing_meta.get("course_title") or "").lower()
    if title_a and title_b and (title_a in title_b or title_b in title_a):
        reasons.append("Similar course title")
    reasons.append(f"{round(similarity * 100)}% semantic similarity")
    return ", ".join(reasons)


def rank_semantic(
    new_emb: Embedding,
    window: Sequence[Embedding],
    resolve_signature: SignatureResolver,
    threshold: float = 0.6,
) -> list[MatchCandidate]:
    scored: list[MatchCandidate] = []
    for existing in window:
        if existing.id == new_emb.id or existing.signature_id == new_emb.signature_id:
            continue
        similarity = cosine_similarity(new_emb.vector, existing.vector)
        if similarity < threshold:
            continue
        signature = resolve_signature(existing.signature_id)
        if signature is None:
            logger.warning("Embedding %s has no stored signature %s", existing.id, existing.signature_id)
            continue
        scored.append(
            MatchCandidate(
                signature=signature,
                similarity=similarity,
                method="semantic",
                reason=match_reason(new_emb.metadata, existing.metadata, similarity),
            )
        )
    scored.sort(key=lambda item: item.similarity, reverse=True)
    return scored


class SemanticMatcher:
    """Compare an embedding with the most recent ``window`` stored embeddings.

    Shares the bounded recency window trade-off of the fuzzy matcher. Raises
    :class:`DimensionMismatch` when a stored vector differs in length.
    """

    def __init__(self, store: CorpusStore, window: int = 100) -> None:
        self.store = store
        self.window = window

    def find_semantic_matches(self, new_emb: Embedding, threshold: float = 0.6) -> list[MatchCandidate]:
        recent = self.store.scan_recent("embedding", self.window)
        return rank_semantic(new_emb, recent, self._resolve, threshold)

    def _resolve(self, signature_id: str) -> Signature | None:
        return self.store.get("signature", signature_id)


__all__ = ["cosine_similarity", "match_reason", "rank_semantic", "SemanticMatcher"]
