"""Hashing utilities."""

from __future__ import annotations

import hashlib


def stable_bucket(token: str, buckets: int) -> int:
    """Map a token to a bucket index that is stable across processes."""
    digest = hashlib.blake2b(token.encode("utf-8"), digest_size=8).digest()
    return int.from_bytes(digest, "big") % buckets
