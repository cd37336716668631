"""FastAPI application setup for Syllabus Match."""

from __future__ import annotations

from fastapi import FastAPI

from syllabus_match.api.dependencies import get_app_settings, get_engine, get_store
from syllabus_match.api.routes_admin import router as admin_router
from syllabus_match.api.routes_match import router as match_router
from syllabus_match.core.logging import configure_logging

configure_logging()

app = FastAPI(
    title="Syllabus Match",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.include_router(match_router, prefix="/syllabi", tags=["match"])
app.include_router(admin_router, prefix="", tags=["admin"])


@app.on_event("startup")
async def startup() -> None:
    """Warm up core singletons on startup."""
    get_app_settings()
    get_store()
    get_engine()


@app.get("/health", tags=["admin"])
def health() -> dict[str, bool]:
    """Simple liveness check."""
    return {"ok": True}
