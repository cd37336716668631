"""Record identifiers."""

from __future__ import annotations

import uuid


def new_id(prefix: str) -> str:
    """Random identifier tagged with its record kind, e.g. ``sig_3f2a...``."""
    return f"{prefix}_{uuid.uuid4().hex}"
