"""Document-level search built on the similarity kernel.

Glues the embedder and document store ports to
:class:`~embedsearch.app.search_service.SimilaritySearchService`: embed the
query, stream the owner's candidates, rank them, then load the matching
documents in ranked order.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from pydantic import BaseModel, Field

from embedsearch.app.ports import DocumentStorePort, EmbeddingPort
from embedsearch.app.search_service import SimilaritySearchService
from embedsearch.core.cancellation import CancellationToken
from embedsearch.core.scoring import cosine

logger = logging.getLogger(__name__)


class DocumentMatch(BaseModel):
    """Single ranked document returned by a text search."""

    document_id: int = Field(..., description="Document identifier")
    owner_id: int = Field(..., description="Document owner")
    title: str = Field(..., description="Document title")
    body: str = Field("", description="Document body")
    score: int = Field(..., description="Raw int8 dot-product score")
    cosine: float = Field(..., description="Cosine similarity of the quantized vectors")


@dataclass(frozen=True, slots=True)
class SampleDocument:
    owner_id: int
    title: str
    body: str


SAMPLE_DOCUMENTS: tuple[SampleDocument, ...] = (
    SampleDocument(
        owner_id=1,
        title="Introduction to C#",
        body="C# is a modern, object-oriented programming language developed by Microsoft.",
    ),
    SampleDocument(
        owner_id=1,
        title="Entity Framework Core Guide",
        body=(
            "EF Core is a lightweight, extensible, open-source, and cross-platform version "
            "of the popular Entity Framework data access technology."
        ),
    ),
    SampleDocument(
        owner_id=2,
        title="Getting Started with ASP.NET Core",
        body=(
            "ASP.NET Core is a cross-platform, high-performance, open-source framework for "
            "building modern, cloud-enabled, Internet-connected apps."
        ),
    ),
)


class DocumentSearchService:
    """Index documents by title embedding and search them with free text."""

    def __init__(
        self,
        *,
        embedder: EmbeddingPort,
        document_store: DocumentStorePort,
        search_service: SimilaritySearchService,
    ) -> None:
        self._embedder = embedder
        self._store = document_store
        self._search = search_service

    def add_document(self, *, owner_id: int, title: str, body: str = "") -> int:
        """Embed ``title`` and persist the document."""
        # embed_many is the document-side path; embed is reserved for queries
        [embedding] = self._embedder.embed_many([title])
        return self._store.add(owner_id=owner_id, title=title, body=body, embedding=embedding)

    def seed(self, documents: Iterable[SampleDocument] = SAMPLE_DOCUMENTS) -> list[int]:
        """Store ``documents`` with titles embedded in one batch."""
        docs = list(documents)
        embeddings = self._embedder.embed_many([doc.title for doc in docs])
        document_ids = [
            self._store.add(
                owner_id=doc.owner_id,
                title=doc.title,
                body=doc.body,
                embedding=embedding,
            )
            for doc, embedding in zip(docs, embeddings, strict=True)
        ]
        logger.info("Seeded %d documents", len(document_ids))
        return document_ids

    def search(
        self,
        text: str,
        *,
        owner_id: int | None,
        max_results: int,
        min_score: int | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> list[DocumentMatch]:
        """Return documents closest to ``text``, best first."""
        query = self._embedder.embed(text)
        hits = self._search.find_closest_scored(
            query,
            self._store.candidates(owner_id=owner_id),
            max_results,
            min_score=min_score,
            cancel_token=cancel_token,
        )
        records = self._store.get_many(int(hit.id) for hit in hits)

        matches: list[DocumentMatch] = []
        for hit in hits:
            record = records.get(int(hit.id))
            if record is None:
                # Deleted between the scan and the lookup.
                logger.warning("Document %s vanished before it could be loaded", hit.id)
                continue
            matches.append(
                DocumentMatch(
                    document_id=record.document_id,
                    owner_id=record.owner_id,
                    title=record.title,
                    body=record.body,
                    score=hit.score,
                    cosine=cosine(query, record.vector(query.dimension)),
                )
            )
        logger.debug("Query matched %d of at most %d documents", len(matches), max_results)
        return matches
