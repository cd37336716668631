"""Embedding providers."""

from __future__ import annotations

import math
import re
from typing import Any, Protocol, Sequence

import requests

from syllabus_match.core.config import Settings
from syllabus_match.core.errors import EmbeddingProviderError
from syllabus_match.utils.hashing import stable_bucket

_WORD_RE = re.compile(r"[a-z0-9]+")

DEFAULT_MODELS = {
    "hashed": "hashed",
    "http": "text-embedding-3-small",
    "sentence-transformers": "all-MiniLM-L6-v2",
}


class EmbeddingProvider(Protocol):
    """Anything that turns text into a fixed-length vector."""

    name: str

    @property
    def dim(self) -> int: ...

    def vectorize(self, text: str) -> list[float]: ...


class HashedEmbeddingProvider:
    """Deterministic hash-bucket embedding used offline and as a fallback.

    Each word adds ``1 / (position + 1)`` to a bucket picked by a stable hash,
    so earlier words weigh more. Only exact token overlap produces similarity;
    this is a stand-in for a real model, not a ranking signal.
    """

    name = "hashed"

    def __init__(self, dim: int = 384) -> None:
        self._dim = dim

    @property
    def dim(self) -> int:
        return self._dim

    def vectorize(self, text: str) -> list[float]:
        vector = [0.0] * self._dim
        for index, word in enumerate(_tokenize(text)):
            vector[stable_bucket(word, self._dim)] += 1.0 / (index + 1)
        return l2_normalize(vector)


class HttpEmbeddingProvider:
    """Remote embedding service reached over HTTP."""

    name = "http"

    def __init__(
        self,
        endpoint: str,
        model: str,
        dim: int,
        timeout_s: float = 5.0,
        api_key: str | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.endpoint = endpoint
        self.model = model
        self.timeout_s = timeout_s
        self._dim = dim
        self._session = session or requests.Session()
        if api_key:
            self._session.headers["Authorization"] = f"Bearer {api_key}"

    @property
    def dim(self) -> int:
        return self._dim

    def vectorize(self, text: str) -> list[float]:
        try:
            resp = self._session.post(
                self.endpoint,
                json={"model": self.model, "input": text},
                timeout=self.timeout_s,
            )
            resp.raise_for_status()
            payload = resp.json()
        except (requests.RequestException, ValueError) as exc:
            raise EmbeddingProviderError(f"Embedding request to {self.endpoint} failed: {exc}") from exc
        return _parse_vector(payload)


class SentenceTransformerProvider:
    """Local sentence-transformers model (installed with the ``models`` extra)."""

    name = "sentence-transformers"

    def __init__(self, model_name: str, device: str | None = None) -> None:
        from sentence_transformers import SentenceTransformer

        self.model_name = model_name
        self._model = SentenceTransformer(model_name, device=device)
        self._dim = int(self._model.get_sentence_embedding_dimension())

    @property
    def dim(self) -> int:
        return self._dim

    def vectorize(self, text: str) -> list[float]:
        vector = self._model.encode(text, convert_to_numpy=True, show_progress_bar=False)
        return [float(value) for value in vector.tolist()]


def build_provider(settings: Settings) -> EmbeddingProvider:
    """Instantiate the provider named in settings."""
    if settings.embedding_provider == "http":
        if not settings.embedding_endpoint:
            raise ValueError("embedding_endpoint is required for the http provider")
        return HttpEmbeddingProvider(
            endpoint=settings.embedding_endpoint,
            model=model_name(settings),
            dim=settings.embedding_dim,
            timeout_s=settings.embedding_timeout_s,
            api_key=settings.embedding_api_key,
        )
    if settings.embedding_provider == "sentence-transformers":
        return SentenceTransformerProvider(model_name(settings))
    return HashedEmbeddingProvider(dim=settings.embedding_dim)


def model_name(settings: Settings) -> str:
    """Configured model, or the default for the configured provider."""
    return settings.embedding_model or DEFAULT_MODELS[settings.embedding_provider]


def l2_normalize(vector: Sequence[float]) -> list[float]:
    """Scale to unit length; the zero vector is returned unchanged."""
    norm = math.sqrt(sum(value * value for value in vector))
    if norm == 0:
        return list(vector)
    inv = 1.0 / norm
    return [value * inv for value in vector]


def _tokenize(text: str) -> list[str]:
    return [word for word in _WORD_RE.findall(text.lower()) if len(word) > 2]


def _parse_vector(payload: Any) -> list[float]:
    if isinstance(payload, dict):
        if "embedding" in payload:
            payload = payload["embedding"]
        elif payload.get("data"):
            payload = payload["data"][0].get("embedding")
    if not isinstance(payload, list) or not payload:
        raise EmbeddingProviderError("Embedding response did not contain a vector")
    try:
        return [float(value) for value in payload]
    except (TypeError, ValueError) as exc:
        raise EmbeddingProviderError("Embedding response contained non-numeric values") from exc


__all__ = [
    "EmbeddingProvider",
    "HashedEmbeddingProvider",
    "HttpEmbeddingProvider",
    "SentenceTransformerProvider",
    "build_provider",
    "model_name",
    "DEFAULT_MODELS",
    "l2_normalize",
]
