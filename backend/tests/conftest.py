"""Test fixtures for Syllabus Match."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))


@pytest.fixture(autouse=True)
def reset_state(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Reset global singletons and environment between tests."""
    monkeypatch.setenv("SYLM_DB_PATH", str(tmp_path / "corpus.db"))
    monkeypatch.delenv("SYLM_CONFIG", raising=False)
    monkeypatch.delenv("SYLM_STORE_BACKEND", raising=False)
    monkeypatch.delenv("SYLM_EMBEDDING_PROVIDER", raising=False)

    from syllabus_match.api import dependencies as deps

    deps.reset()
    yield
    deps.reset()


@pytest.fixture
def settings():
    from syllabus_match.core.config import Settings

    return Settings.from_yaml()


@pytest.fixture
def memory_store():
    from syllabus_match.db.corpus import InMemoryCorpusStore

    return InMemoryCorpusStore()


@pytest.fixture
def engine(memory_store, settings):
    from syllabus_match.matching import MatchEngine

    match_engine = MatchEngine(store=memory_store, settings=settings)
    yield match_engine
    match_engine.close()


@pytest.fixture(scope="session")
def sample_syllabus() -> str:
    return (
        "Springfield University\n"
        "Department of Computer Science\n"
        "CS101: Introduction to Computer Science\n"
        "Instructor: Dr. Jane Smith (jsmith@springfield.edu)\n"
        "Fall 2024\n"
        "\n"
        "Office hours are held Tuesdays in the library.\n"
    )
