"""Embedding generation for syllabus records."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout

from syllabus_match.core.errors import DimensionMismatch
from syllabus_match.core.logging import get_logger
from syllabus_match.core.metrics import EMBEDDING_FALLBACKS
from syllabus_match.ingest.providers import EmbeddingProvider, HashedEmbeddingProvider, l2_normalize
from syllabus_match.models.entities import UNKNOWN, Embedding, SyllabusRecord
from syllabus_match.utils.ids import new_id
from syllabus_match.utils.time import now_ms

logger = get_logger(__name__)

SOURCE_FIELDS = (
    "course_code",
    "course_title",
    "instructor",
    "university",
    "department",
    "semester",
    "year",
)
METADATA_FIELDS = ("course_code", "course_title", "university", "semester", "year")


def source_text(record: SyllabusRecord) -> str:
    """Space-joined identifying fields, skipping the missing ones."""
    return " ".join(value for value in (getattr(record, name) for name in SOURCE_FIELDS) if value)


class EmbeddingGenerator:
    """Vectorize records through a provider, falling back to hashed vectors.

    The provider runs on a worker thread bounded by ``timeout_s``. Failures and
    timeouts are logged and replaced by :class:`HashedEmbeddingProvider`
    output of the same dimension. A provider whose declared ``dim`` differs
    from ``dim`` is rejected at construction, and a vector of the wrong length
    at call time; both raise :class:`DimensionMismatch`.
    """

    def __init__(
        self,
        provider: EmbeddingProvider | None = None,
        dim: int = 384,
        timeout_s: float = 5.0,
    ) -> None:
        self.dim = dim
        self.timeout_s = timeout_s
        self.fallback = HashedEmbeddingProvider(dim=dim)
        self.provider = provider or self.fallback
        if self.provider.dim != dim:
            raise DimensionMismatch(dim, self.provider.dim)
        self._executor: ThreadPoolExecutor | None = None

    def embed(self, record: SyllabusRecord, signature_id: str) -> Embedding:
        text = source_text(record)
        vector, model = self._vectorize(text)
        return Embedding(
            id=new_id("emb"),
            signature_id=signature_id,
            vector=tuple(vector),
            source_text=text,
            metadata={name: getattr(record, name) or UNKNOWN for name in METADATA_FIELDS},
            model=model,
            created_at=now_ms(),
        )

    def close(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=False)
            self._executor = None

    def _vectorize(self, text: str) -> tuple[list[float], str]:
        if self.provider is self.fallback:
            return self.fallback.vectorize(text), self.fallback.name

        future = self._pool().submit(self.provider.vectorize, text)
        try:
            raw = future.result(timeout=self.timeout_s)
        except FutureTimeout:
            future.cancel()
            logger.warning(
                "Embedding provider '%s' timed out after %.1fs; using hashed fallback",
                self.provider.name,
                self.timeout_s,
            )
            EMBEDDING_FALLBACKS.labels(reason="timeout").inc()
            return self.fallback.vectorize(text), self.fallback.name
        except Exception as exc:
            logger.warning("Embedding provider '%s' failed: %s; using hashed fallback", self.provider.name, exc)
            EMBEDDING_FALLBACKS.labels(reason="error").inc()
            return self.fallback.vectorize(text), self.fallback.name

        if len(raw) != self.dim:
            raise DimensionMismatch(self.dim, len(raw))
        return l2_normalize(raw), self.provider.name

    def _pool(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="embed")
        return self._executor


__all__ = ["EmbeddingGenerator", "source_text", "SOURCE_FIELDS", "METADATA_FIELDS"]
