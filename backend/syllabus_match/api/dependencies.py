"""Shared FastAPI dependencies."""

from __future__ import annotations

from functools import lru_cache

from syllabus_match.core.config import Settings, get_settings
from syllabus_match.db.corpus import CorpusStore, build_store
from syllabus_match.ingest.providers import build_provider
from syllabus_match.matching import MatchEngine

_STORE: CorpusStore | None = None
_ENGINE: MatchEngine | None = None


@lru_cache(maxsize=1)
def get_app_settings() -> Settings:
    return get_settings()


def get_store() -> CorpusStore:
    global _STORE
    if _STORE is None:
        _STORE = build_store(get_app_settings())
    return _STORE


def get_engine() -> MatchEngine:
    global _ENGINE
    if _ENGINE is None:
        settings = get_app_settings()
        _ENGINE = MatchEngine(
            store=get_store(),
            settings=settings,
            provider=build_provider(settings),
        )
    return _ENGINE


def reset() -> None:
    """Drop cached singletons (tests, settings reloads)."""
    global _STORE, _ENGINE
    if _ENGINE is not None:
        _ENGINE.close()
    if _STORE is not None:
        _STORE.close()
    _STORE = None
    _ENGINE = None
    get_app_settings.cache_clear()
    get_settings.cache_clear()


__all__ = ["get_app_settings", "get_store", "get_engine", "reset"]
