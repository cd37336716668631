"""Application configuration handling."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal, Mapping

import yaml
from pydantic import BaseModel, Field, field_validator

ENV_PREFIX = "SYLM_"
DEFAULT_CONFIG_PATH = Path("~/.config/syllabus-match/config.yaml")

_YAML_KEY_MAP: Mapping[tuple[str, ...], str] = {
    ("storage", "db_path"): "db_path",
    ("storage", "backend"): "store_backend",
    ("embeddings", "provider"): "embedding_provider",
    ("embeddings", "model"): "embedding_model",
    ("embeddings", "dim"): "embedding_dim",
    ("embeddings", "endpoint"): "embedding_endpoint",
    ("embeddings", "api_key"): "embedding_api_key",
    ("embeddings", "timeout_s"): "embedding_timeout_s",
    ("matching", "recent_window"): "recent_window",
    ("matching", "fuzzy_threshold"): "fuzzy_threshold",
    ("matching", "semantic_threshold"): "semantic_threshold",
    ("matching", "join_threshold"): "join_threshold",
    ("matching", "fuzzy_fallback_similarity"): "fuzzy_fallback_similarity",
    ("matching", "min_confidence"): "min_confidence",
}


class Settings(BaseModel):
    """Runtime configuration loaded from YAML file and environment variables."""

    db_path: Path = Field(default=Path.home() / ".syllabus-match" / "corpus.db")
    store_backend: Literal["sqlite", "memory"] = "sqlite"
    embedding_provider: Literal["hashed", "http", "sentence-transformers"] = "hashed"
    # None selects the default model of the chosen provider.
    embedding_model: str | None = None
    embedding_dim: int = Field(default=384, ge=1)
    embedding_endpoint: str | None = None
    embedding_api_key: str | None = None
    embedding_timeout_s: float = Field(default=5.0, gt=0)
    # Bounded scan of the most recent corpus records; trades recall for cost.
    recent_window: int = Field(default=100, ge=1)
    fuzzy_threshold: float = 0.8
    semantic_threshold: float = 0.6
    join_threshold: float = 0.8
    fuzzy_fallback_similarity: float = 0.7
    min_confidence: float = 0.5

    model_config = {
        "validate_assignment": True,
        "extra": "ignore",
    }

    @field_validator("db_path", mode="before")
    @classmethod
    def _expand_db_path(cls, value: Any) -> Path:
        if isinstance(value, Path):
            return value.expanduser()
        if isinstance(value, str):
            return Path(value).expanduser()
        raise TypeError("db_path must be a path or string")

    @field_validator(
        "fuzzy_threshold",
        "semantic_threshold",
        "join_threshold",
        "fuzzy_fallback_similarity",
        "min_confidence",
    )
    @classmethod
    def _check_unit_interval(cls, value: float) -> float:
        if not 0.0 <= value <= 1.0:
            raise ValueError("must be between 0 and 1")
        return value

    @classmethod
    def from_yaml(cls, path: Path | None = None, environ: Mapping[str, str] | None = None) -> "Settings":
        """Defaults, then the YAML file, then ``SYLM_*`` variables; later wins."""
        environ = os.environ if environ is None else environ
        data: dict[str, Any] = {}
        config_path = _config_path(path, environ)
        if config_path is not None:
            data.update(_read_yaml(config_path))
        data.update(_env_overrides(environ))
        return cls(**data)


def _config_path(path: Path | None, environ: Mapping[str, str]) -> Path | None:
    # An explicit or SYLM_CONFIG path must exist; the default location is optional.
    if path is None and environ.get(f"{ENV_PREFIX}CONFIG"):
        path = Path(environ[f"{ENV_PREFIX}CONFIG"])
    if path is not None:
        return path.expanduser()
    default = DEFAULT_CONFIG_PATH.expanduser()
    return default if default.exists() else None


def _read_yaml(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh) or {}
    if not isinstance(raw, Mapping):
        raise ValueError(f"Config file {path} must contain a mapping")
    data: dict[str, Any] = {}
    for section, values in raw.items():
        if isinstance(values, Mapping):
            for key, value in values.items():
                field_name = _YAML_KEY_MAP.get((section, key))
                if field_name:
                    data[field_name] = value
        elif section in Settings.model_fields:
            data[section] = values
    return data


def _env_overrides(environ: Mapping[str, str]) -> dict[str, str]:
    overrides: dict[str, str] = {}
    for key, value in environ.items():
        if key.startswith(ENV_PREFIX):
            field_name = key[len(ENV_PREFIX) :].lower()
            if field_name in Settings.model_fields:
                overrides[field_name] = value
    return overrides


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings, loaded once."""
    return Settings.from_yaml()


__all__ = ["Settings", "get_settings", "ENV_PREFIX", "DEFAULT_CONFIG_PATH"]
