"""Similarity search kernel: quantized vectors, scoring and top-k selection.

Nothing in this package performs I/O or logging.
"""

from embedsearch.core.cancellation import CancellationToken
from embedsearch.core.scoring import cosine, max_score, score
from embedsearch.core.topk import ScoredCandidate, TopKSelector, merge, select
from embedsearch.core.vector import QuantizationScheme, QuantizedVector, quantize

__all__ = [
    "CancellationToken",
    "QuantizationScheme",
    "QuantizedVector",
    "ScoredCandidate",
    "TopKSelector",
    "cosine",
    "max_score",
    "merge",
    "quantize",
    "score",
    "select",
]
