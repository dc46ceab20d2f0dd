"""In-memory document store implementing DocumentStorePort."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from embedsearch.app.ports.document_store import DocumentRecord, DocumentStorePort
from embedsearch.core.vector import QuantizedVector
from embedsearch.errors import DimensionMismatch


class InMemoryDocumentStore(DocumentStorePort):
    """Dict-backed store keyed by document id; iteration keeps insertion order."""

    def __init__(self, *, dimension: int | None = None) -> None:
        self._dimension = dimension
        self._documents: dict[int, DocumentRecord] = {}
        self._next_id = 1

    @property
    def dimension(self) -> int | None:
        return self._dimension

    def add(
        self,
        *,
        owner_id: int,
        title: str,
        body: str,
        embedding: QuantizedVector,
    ) -> int:
        if self._dimension is not None and embedding.dimension != self._dimension:
            raise DimensionMismatch(
                f"Embedding for {title!r} has dimension {embedding.dimension}; "
                f"store expects {self._dimension}",
                expected=self._dimension,
                actual=embedding.dimension,
            )
        document_id = self._next_id
        self._next_id += 1
        self._documents[document_id] = DocumentRecord(
            document_id=document_id,
            owner_id=owner_id,
            title=title,
            body=body,
            embedding=embedding.to_bytes(),
        )
        return document_id

    def candidates(self, *, owner_id: int | None = None) -> Iterator[tuple[int, QuantizedVector]]:
        for document_id, record in list(self._documents.items()):
            if owner_id is not None and record.owner_id != owner_id:
                continue
            yield document_id, record.vector()

    def get_many(self, document_ids: Iterable[int]) -> dict[int, DocumentRecord]:
        return {
            document_id: self._documents[document_id]
            for document_id in document_ids
            if document_id in self._documents
        }

    def count(self, *, owner_id: int | None = None) -> int:
        if owner_id is None:
            return len(self._documents)
        return sum(1 for record in self._documents.values() if record.owner_id == owner_id)

    def clear(self) -> None:
        self._documents.clear()

    def close(self) -> None:
        return None

    def __enter__(self) -> InMemoryDocumentStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
