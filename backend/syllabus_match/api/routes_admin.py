"""Administrative endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from syllabus_match.api.dependencies import get_store
from syllabus_match.core.errors import CorpusUnavailable
from syllabus_match.core.metrics import metrics_response
from syllabus_match.db.corpus import CorpusStore
from syllabus_match.models.dto import RecentSignaturesResponse

router = APIRouter()


@router.get("/signatures/recent", response_model=RecentSignaturesResponse)
def recent_signatures(
    limit: int = Query(default=20, ge=1, le=500),
    store: CorpusStore = Depends(get_store),
) -> RecentSignaturesResponse:
    try:
        signatures = store.scan_recent("signature", limit)
        total = store.count("signature")
    except CorpusUnavailable as exc:
        raise HTTPException(status_code=503, detail="Corpus store unavailable") from exc
    return RecentSignaturesResponse.model_validate(
        {"total": total, "signatures": [signature.to_dict() for signature in signatures]}
    )


@router.get("/metrics")
def metrics() -> Response:
    return metrics_response()
