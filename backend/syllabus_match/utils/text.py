"""Text processing helpers."""

from __future__ import annotations

import re


WHITESPACE_RE = re.compile(r"\s+")
NON_ALNUM_RE = re.compile(r"[^a-z0-9]")


def normalize(text: str) -> str:
    """Collapse whitespace and strip."""
    return WHITESPACE_RE.sub(" ", text).strip()


def alnum_lower(text: str) -> str:
    """Lowercase and drop every character outside ``[a-z0-9]``."""
    return NON_ALNUM_RE.sub("", text.lower())
