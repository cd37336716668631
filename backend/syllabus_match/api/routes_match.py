"""Syllabus matching endpoint."""

from __future__ import annotations

import time

from fastapi import APIRouter, Depends, HTTPException

from syllabus_match.api.dependencies import get_engine
from syllabus_match.core.errors import CorpusUnavailable, DimensionMismatch
from syllabus_match.core.logging import get_logger
from syllabus_match.core.metrics import REQUEST_COUNT, REQUEST_LATENCY
from syllabus_match.matching import MatchEngine
from syllabus_match.models.dto import MatchRequest, MatchResponse

router = APIRouter()
logger = get_logger(__name__)


@router.post("/match", response_model=MatchResponse)
def match_syllabus(request: MatchRequest, engine: MatchEngine = Depends(get_engine)) -> MatchResponse:
    """Place an uploaded syllabus: join, confirm, or create a study group."""
    start_time = time.perf_counter()
    status = "500"
    try:
        result = engine.process(request.raw_text, request.owner_id)
        status = "200"
    except CorpusUnavailable as exc:
        status = "503"
        logger.error("Corpus unavailable: %s", exc)
        raise HTTPException(status_code=503, detail="Corpus store unavailable") from exc
    except DimensionMismatch as exc:
        logger.error("Embedding configuration error: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    finally:
        REQUEST_LATENCY.labels(endpoint="match", method="POST").observe(time.perf_counter() - start_time)
        REQUEST_COUNT.labels(endpoint="match", method="POST", status=status).inc()
    return MatchResponse.model_validate(
        {
            "record": result.record.to_dict(),
            "signature": result.signature.to_dict(),
            "decision": result.decision.to_dict(),
        }
    )
