"""Kanon 2 (Isaacus) embedding adapter implementing EmbeddingPort."""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from typing import Any

from embedsearch.app.ports.embedding import EmbeddingPort
from embedsearch.core.vector import QuantizationScheme, QuantizedVector, quantize
from embedsearch.utils.offline import OfflineModeGate

logger = logging.getLogger(__name__)


class Kanon2Embedder(EmbeddingPort):
    """Embedding adapter backed by the Isaacus Kanon 2 API.

    Float embeddings returned by the API are quantized locally, so query and
    document vectors share the configured scheme.
    """

    MODEL_ID = "kanon-2-embedder"
    DOCUMENT_TASK = "retrieval/document"
    QUERY_TASK = "retrieval/query"

    def __init__(
        self,
        *,
        offline_gate: OfflineModeGate,
        dimension: int = 768,
        scheme: QuantizationScheme = "unit",
        api_key: str | None = None,
        api_base: str | None = None,
        client: Any | None = None,
    ) -> None:
        offline_gate.require("Kanon 2 embeddings")
        self._dimension = int(dimension)
        self._scheme: QuantizationScheme = scheme

        if client is not None:
            self._client = client
            return

        self._api_key = api_key or os.getenv("ISAACUS_API_KEY")
        self._api_base = api_base or os.getenv("ISAACUS_API_BASE")
        if not self._api_key:
            raise RuntimeError(
                "ISAACUS_API_KEY required for Kanon 2 embeddings. "
                "Set EMBEDSEARCH_ISAACUS_API_KEY or the ISAACUS_API_KEY env var."
            )

        try:
            from isaacus import Isaacus  # imported lazily to keep optional dependency
        except Exception as exc:  # pragma: no cover - optional dep
            raise RuntimeError(
                "The 'isaacus' package is required for Kanon 2 embeddings. "
                "Install with 'pip install embedsearch[online]'."
            ) from exc

        if self._api_base is not None:
            self._client = Isaacus(api_key=self._api_key, base_url=self._api_base)
        else:
            self._client = Isaacus(api_key=self._api_key)

    @property
    def dimension(self) -> int:
        return self._dimension

    def embed(self, text: str) -> QuantizedVector:
        """Embed a search query."""
        return self._embed([text], task=self.QUERY_TASK)[0]

    def embed_many(self, texts: Sequence[str]) -> list[QuantizedVector]:
        """Embed documents for storage."""
        if not texts:
            return []
        return self._embed(list(texts), task=self.DOCUMENT_TASK)

    def _embed(self, texts: list[str], *, task: str) -> list[QuantizedVector]:
        response = self._client.embeddings.create(
            model=self.MODEL_ID,
            task=task,
            texts=texts,
            dimensions=self._dimension,
        )
        rows = [entry.embedding for entry in response.embeddings]
        if len(rows) != len(texts):
            raise RuntimeError(
                f"Kanon 2 returned {len(rows)} embeddings for {len(texts)} texts"
            )
        logger.debug("Embedded %d texts with %s (%s)", len(texts), self.MODEL_ID, task)
        return [
            quantize(row, scheme=self._scheme, dimension=self._dimension) for row in rows
        ]
