"""Syllabus matching components."""

from .engine import MatchEngine
from .fuzzy import FuzzyMatcher, jaccard
from .hybrid import recommend
from .semantic import SemanticMatcher, cosine_similarity

__all__ = [
    "MatchEngine",
    "FuzzyMatcher",
    "SemanticMatcher",
    "recommend",
    "jaccard",
    "cosine_similarity",
]
