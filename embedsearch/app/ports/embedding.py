"""Embedding port interface.

An embedder turns text into a :class:`QuantizedVector` of a fixed,
deployment-wide dimension. Query and document vectors must come from the
same embedder configuration so their scores stay comparable.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from embedsearch.core.vector import QuantizedVector


class EmbeddingPort(Protocol):
    """Port interface for text embedding providers.

    Implementations should provide:
    - A fixed output ``dimension``
    - Deterministic quantization (same text, same vector)
    - Batched embedding for seeding document stores
    """

    @property
    def dimension(self) -> int:
        """Length of every vector this embedder produces."""
        ...

    def embed(self, text: str) -> QuantizedVector:
        """Embed a single search query."""
        ...

    def embed_many(self, texts: Sequence[str]) -> list[QuantizedVector]:
        """Embed documents for storage, in order."""
        ...
