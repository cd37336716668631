"""Match orchestration."""

from __future__ import annotations

import time

from syllabus_match.core.config import Settings
from syllabus_match.core.errors import DimensionMismatch
from syllabus_match.core.logging import get_logger
from syllabus_match.core.metrics import DECISION_LATENCY, DECISIONS
from syllabus_match.db.corpus import CorpusStore
from syllabus_match.ingest.embeddings import EmbeddingGenerator
from syllabus_match.ingest.extractor import extract
from syllabus_match.ingest.providers import EmbeddingProvider
from syllabus_match.ingest.signature import build_signature
from syllabus_match.matching.fuzzy import FuzzyMatcher
from syllabus_match.matching.hybrid import recommend
from syllabus_match.matching.semantic import SemanticMatcher
from syllabus_match.models.entities import Decision, ProcessResult, SyllabusRecord

logger = get_logger(__name__)


class MatchEngine:
    """Coordinates extraction, fuzzy and semantic matching, and persistence.

    Both corpus scans finish before anything is written, so the new upload
    never matches itself and a store failure never leaves a partial decision:
    :class:`~syllabus_match.core.errors.CorpusUnavailable` propagates instead.
    The new signature and its embedding are persisted whatever the
    recommendation, in one atomic ``append_all`` with the signature first
    since the embedding references it. A failed write stores neither.
    """

    def __init__(
        self,
        store: CorpusStore,
        settings: Settings,
        provider: EmbeddingProvider | None = None,
        embedder: EmbeddingGenerator | None = None,
    ) -> None:
        self.store = store
        self.settings = settings
        self.embedder = embedder or EmbeddingGenerator(
            provider=provider,
            dim=settings.embedding_dim,
            timeout_s=settings.embedding_timeout_s,
        )
        if self.embedder.dim != settings.embedding_dim:
            raise DimensionMismatch(settings.embedding_dim, self.embedder.dim)
        self.fuzzy = FuzzyMatcher(store, window=settings.recent_window)
        self.semantic = SemanticMatcher(store, window=settings.recent_window)

    def process(self, raw_text: str, owner_id: str) -> ProcessResult:
        """Extract fields from ``raw_text`` and decide where the upload belongs."""
        return self._run(extract(raw_text), owner_id)

    def decide(self, record: SyllabusRecord, owner_id: str) -> Decision:
        return self._run(record, owner_id).decision

    def close(self) -> None:
        self.embedder.close()

    # ------------------------------------------------------------------

    def _run(self, record: SyllabusRecord, owner_id: str) -> ProcessResult:
        start_time = time.perf_counter()
        settings = self.settings

        signature = build_signature(record, owner_id)
        fuzzy_matches = self.fuzzy.find_fuzzy_matches(signature, threshold=settings.fuzzy_threshold)
        embedding = self.embedder.embed(record, signature.id)
        semantic_matches = self.semantic.find_semantic_matches(embedding, threshold=settings.semantic_threshold)

        best_match, recommendation = recommend(
            fuzzy_matches,
            semantic_matches,
            join_threshold=settings.join_threshold,
            fuzzy_similarity=settings.fuzzy_fallback_similarity,
        )
        target = best_match.signature if best_match is not None else signature
        decision = Decision(
            fuzzy_matches=fuzzy_matches,
            semantic_matches=semantic_matches,
            best_match=best_match,
            recommendation=recommendation,
            needs_review=record.confidence < settings.min_confidence,
            group_key=target.group_key,
        )

        self.store.append_all([("signature", signature), ("embedding", embedding)])

        DECISIONS.labels(recommendation=recommendation).inc()
        DECISION_LATENCY.observe(time.perf_counter() - start_time)
        logger.info(
            "Syllabus %s matched: %s",
            signature.id,
            recommendation,
            extra={
                "ctx_owner_id": owner_id,
                "ctx_recommendation": recommendation,
                "ctx_fuzzy_matches": len(fuzzy_matches),
                "ctx_semantic_matches": len(semantic_matches),
                "ctx_confidence": round(record.confidence, 3),
            },
        )
        return ProcessResult(record=record, signature=signature, embedding=embedding, decision=decision)


__all__ = ["MatchEngine"]
