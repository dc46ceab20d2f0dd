"""Document store port interface and document DTO."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field

from embedsearch.core.vector import QuantizedVector


class DocumentRecord(BaseModel):
    """Stored document with its quantized embedding buffer."""

    model_config = ConfigDict(frozen=True)

    document_id: int = Field(..., description="Store-assigned document identifier")
    owner_id: int = Field(..., description="Owner used to scope candidate sets")
    title: str = Field(..., description="Document title")
    body: str = Field("", description="Document body text")
    embedding: bytes = Field(..., description="Raw int8 embedding buffer")

    def vector(self, dimension: int | None = None) -> QuantizedVector:
        """Decode the stored embedding buffer."""
        return QuantizedVector.from_buffer(self.embedding, dimension)


class DocumentStorePort(Protocol):
    """Port interface for persisting documents and streaming candidates.

    Implementations hold whatever resource backs them (a connection, a file)
    and release it in :meth:`close`; stores are usable as context managers.
    """

    def add(
        self,
        *,
        owner_id: int,
        title: str,
        body: str,
        embedding: QuantizedVector,
    ) -> int:
        """Persist a document and return its identifier."""
        ...

    def candidates(self, *, owner_id: int | None = None) -> Iterator[tuple[int, QuantizedVector]]:
        """Yield ``(document_id, vector)`` pairs, optionally scoped to an owner."""
        ...

    def get_many(self, document_ids: Iterable[int]) -> dict[int, DocumentRecord]:
        """Load full documents keyed by identifier (missing ids are omitted)."""
        ...

    def count(self, *, owner_id: int | None = None) -> int:
        """Number of stored documents, optionally scoped to an owner."""
        ...

    def clear(self) -> None:
        """Remove every stored document."""
        ...

    def close(self) -> None:
        """Release held resources."""
        ...

    def __enter__(self) -> DocumentStorePort: ...

    def __exit__(self, *exc_info: object) -> None: ...
