"""Deterministic offline embedder based on feature hashing."""

from __future__ import annotations

import hashlib
import re
from collections.abc import Iterator, Sequence

import numpy as np

from embedsearch.app.ports.embedding import EmbeddingPort
from embedsearch.core.vector import QuantizationScheme, QuantizedVector, quantize
from embedsearch.errors import InvalidArgument

_TOKEN_RE = re.compile(r"\w+", re.UNICODE)


class HashingEmbedder(EmbeddingPort):
    """Embed text by hashing word and character-trigram features.

    Each feature is hashed with BLAKE2b into a signed bucket of a dense float
    vector, which is then quantized. No model download, no network, and the
    same text always yields the same vector. Texts sharing words or word
    fragments land close together, which is enough for demos and tests but
    not a substitute for a trained model.
    """

    WORD_WEIGHT = 1.0
    TRIGRAM_WEIGHT = 0.5

    def __init__(self, *, dimension: int = 384, scheme: QuantizationScheme = "unit") -> None:
        if dimension <= 0:
            raise InvalidArgument(f"dimension must be positive; got {dimension}")
        self._dimension = int(dimension)
        self._scheme: QuantizationScheme = scheme

    @property
    def dimension(self) -> int:
        return self._dimension

    def embed(self, text: str) -> QuantizedVector:
        dense = np.zeros(self._dimension, dtype=np.float64)
        for feature, weight in _features(text):
            digest = int.from_bytes(
                hashlib.blake2b(feature.encode("utf-8"), digest_size=8).digest(), "big"
            )
            bucket = digest % self._dimension
            sign = 1.0 if (digest >> 63) & 1 else -1.0
            dense[bucket] += sign * weight
        return quantize(dense, scheme=self._scheme, dimension=self._dimension)

    def embed_many(self, texts: Sequence[str]) -> list[QuantizedVector]:
        return [self.embed(text) for text in texts]


def _features(text: str) -> Iterator[tuple[str, float]]:
    for token in _TOKEN_RE.findall(text.lower()):
        yield f"w:{token}", HashingEmbedder.WORD_WEIGHT
        padded = f"#{token}#"
        for start in range(len(padded) - 2):
            yield f"t:{padded[start:start + 3]}", HashingEmbedder.TRIGRAM_WEIGHT
