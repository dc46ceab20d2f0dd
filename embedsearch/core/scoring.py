"""Dot-product similarity over quantized vectors.

Scores are raw int8 dot products accumulated in int64. They approximate
cosine similarity only when both vectors were quantized from consistently
scaled embeddings (see :mod:`embedsearch.core.vector`); nothing here
re-normalises.
"""

from __future__ import annotations

import math

import numpy as np

from embedsearch.core.vector import QuantizedVector
from embedsearch.errors import DimensionMismatch


def score(a: QuantizedVector, b: QuantizedVector) -> int:
    """Return the dot product of ``a`` and ``b``; higher is more similar."""
    if a.dimension != b.dimension:
        raise DimensionMismatch(
            f"Cannot score vectors of dimension {a.dimension} and {b.dimension}",
            expected=a.dimension,
            actual=b.dimension,
        )
    return int(np.dot(a.values.astype(np.int64), b.values.astype(np.int64)))


def max_score(vector: QuantizedVector) -> int:
    """Self-similarity score, i.e. the squared norm of ``vector``."""
    return score(vector, vector)


def cosine(a: QuantizedVector, b: QuantizedVector) -> float:
    """Cosine of the angle between ``a`` and ``b`` (display only)."""
    denominator = math.sqrt(max_score(a)) * math.sqrt(max_score(b))
    if denominator == 0:
        return 0.0
    return score(a, b) / denominator
