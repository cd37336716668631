"""Exception types raised by the matching engine."""

from __future__ import annotations


class SyllabusMatchError(Exception):
    """Base class for engine errors."""


class DimensionMismatch(SyllabusMatchError, ValueError):
    """Two vectors that must share a length do not.

    Vectors produced under one embedding configuration always agree in length,
    so this signals an inconsistent corpus or provider configuration.
    """

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(f"Vector dimension mismatch: expected {expected}, got {actual}")
        self.expected = expected
        self.actual = actual


class CorpusUnavailable(SyllabusMatchError):
    """The corpus store could not be read or written."""


class EmbeddingProviderError(SyllabusMatchError):
    """The embedding provider failed to return a vector."""


__all__ = [
    "SyllabusMatchError",
    "DimensionMismatch",
    "CorpusUnavailable",
    "EmbeddingProviderError",
]
