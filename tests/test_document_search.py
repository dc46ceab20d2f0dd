from __future__ import annotations

import pytest

from embedsearch.app.adapters.hashing import HashingEmbedder
from embedsearch.app.adapters.memory_store import InMemoryDocumentStore
from embedsearch.app.document_search import SAMPLE_DOCUMENTS, DocumentSearchService
from embedsearch.app.search_service import SimilaritySearchService
from embedsearch.errors import InvalidArgument


@pytest.fixture
def document_search() -> DocumentSearchService:
    service = DocumentSearchService(
        embedder=HashingEmbedder(dimension=128),
        document_store=InMemoryDocumentStore(dimension=128),
        search_service=SimilaritySearchService(),
    )
    service.seed()
    return service


def test_seed_stores_sample_documents() -> None:
    store = InMemoryDocumentStore(dimension=64)
    service = DocumentSearchService(
        embedder=HashingEmbedder(dimension=64),
        document_store=store,
        search_service=SimilaritySearchService(),
    )

    ids = service.seed()

    assert len(ids) == len(SAMPLE_DOCUMENTS)
    assert store.count(owner_id=1) == 2
    assert store.count(owner_id=2) == 1


def test_search_ranks_exact_title_first(document_search) -> None:
    matches = document_search.search("Introduction to C#", owner_id=1, max_results=5)

    assert [m.title for m in matches] == ["Introduction to C#", "Entity Framework Core Guide"]
    assert matches[0].cosine == pytest.approx(1.0)
    assert matches[0].score >= matches[1].score


def test_search_is_scoped_to_owner(document_search) -> None:
    matches = document_search.search("ASP.NET Core", owner_id=1, max_results=5)

    assert "Getting Started with ASP.NET Core" not in [m.title for m in matches]
    assert all(m.owner_id == 1 for m in matches)


def test_search_across_all_owners(document_search) -> None:
    matches = document_search.search("ASP.NET Core", owner_id=None, max_results=1)

    assert [m.title for m in matches] == ["Getting Started with ASP.NET Core"]


def test_search_respects_max_results(document_search) -> None:
    assert len(document_search.search("guide", owner_id=None, max_results=2)) == 2


def test_search_rejects_non_positive_max_results(document_search) -> None:
    with pytest.raises(InvalidArgument):
        document_search.search("guide", owner_id=1, max_results=0)


def test_search_of_unknown_owner_is_empty(document_search) -> None:
    assert document_search.search("anything", owner_id=42, max_results=5) == []


def test_add_document_is_searchable(document_search) -> None:
    doc_id = document_search.add_document(owner_id=3, title="Quantized vector search")

    matches = document_search.search("quantized vector search", owner_id=3, max_results=1)

    assert [m.document_id for m in matches] == [doc_id]
