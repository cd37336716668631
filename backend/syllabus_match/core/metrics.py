"""Prometheus metrics instrumentation."""

from __future__ import annotations

from fastapi import Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

REGISTRY = CollectorRegistry()

REQUEST_COUNT = Counter(
    "sylm_requests_total",
    "Total HTTP requests",
    labelnames=("endpoint", "method", "status"),
    registry=REGISTRY,
)

REQUEST_LATENCY = Histogram(
    "sylm_request_latency_seconds",
    "Latency of HTTP requests",
    labelnames=("endpoint", "method"),
    registry=REGISTRY,
)

DECISION_LATENCY = Histogram(
    "sylm_decision_duration_seconds",
    "Time spent computing a match decision",
    registry=REGISTRY,
)

DECISIONS = Counter(
    "sylm_decisions_total",
    "Match decisions by recommendation",
    labelnames=("recommendation",),
    registry=REGISTRY,
)

EMBEDDING_FALLBACKS = Counter(
    "sylm_embedding_fallbacks_total",
    "Embeddings produced by the local fallback after a provider failure",
    labelnames=("reason",),
    registry=REGISTRY,
)

CORPUS_WRITES = Counter(
    "sylm_corpus_writes_total",
    "Records appended to the corpus store",
    labelnames=("kind",),
    registry=REGISTRY,
)


def metrics_response() -> Response:
    """Return Prometheus metrics as an HTTP response."""
    payload = generate_latest(REGISTRY)
    return Response(content=payload, media_type=CONTENT_TYPE_LATEST)


__all__ = [
    "REGISTRY",
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "DECISION_LATENCY",
    "DECISIONS",
    "EMBEDDING_FALLBACKS",
    "CORPUS_WRITES",
    "metrics_response",
]
