"""Tests for configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from syllabus_match.core.config import Settings


def test_defaults(settings: Settings, tmp_path: Path) -> None:
    assert settings.db_path == tmp_path / "corpus.db"
    assert settings.store_backend == "sqlite"
    assert settings.embedding_provider == "hashed"
    assert settings.embedding_dim == 384
    assert settings.recent_window == 100
    assert settings.fuzzy_threshold == 0.8
    assert settings.semantic_threshold == 0.6
    assert settings.join_threshold == 0.8
    assert settings.fuzzy_fallback_similarity == 0.7


def test_yaml_sections_and_env_overrides(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config = tmp_path / "config.yaml"
    config.write_text(
        "storage:\n"
        "  backend: memory\n"
        "embeddings:\n"
        "  dim: 64\n"
        "  timeout_s: 1.5\n"
        "matching:\n"
        "  recent_window: 25\n"
        "  join_threshold: 0.9\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("SYLM_CONFIG", str(config))
    monkeypatch.setenv("SYLM_RECENT_WINDOW", "50")

    settings = Settings.from_yaml()

    assert settings.store_backend == "memory"
    assert settings.embedding_dim == 64
    assert settings.embedding_timeout_s == 1.5
    assert settings.join_threshold == 0.9
    # environment wins over the file
    assert settings.recent_window == 50


def test_explicit_path_is_used(tmp_path: Path) -> None:
    config = tmp_path / "alt.yaml"
    config.write_text("matching:\n  semantic_threshold: 0.5\n", encoding="utf-8")
    assert Settings.from_yaml(config).semantic_threshold == 0.5


@pytest.mark.parametrize("field", ["fuzzy_threshold", "semantic_threshold", "join_threshold", "min_confidence"])
def test_thresholds_must_be_in_unit_interval(field: str) -> None:
    with pytest.raises(ValidationError):
        Settings(**{field: 1.5})


def test_unknown_backend_is_rejected() -> None:
    with pytest.raises(ValidationError):
        Settings(store_backend="postgres")


def test_injected_environment_replaces_process_environment() -> None:
    settings = Settings.from_yaml(environ={"SYLM_JOIN_THRESHOLD": "0.95", "OTHER_JOIN_THRESHOLD": "0.1"})
    assert settings.join_threshold == 0.95
    # SYLM_DB_PATH from the process environment is not consulted
    assert settings.db_path == Path.home() / ".syllabus-match" / "corpus.db"


def test_missing_explicit_config_file_is_an_error(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        Settings.from_yaml(tmp_path / "missing.yaml", environ={})
