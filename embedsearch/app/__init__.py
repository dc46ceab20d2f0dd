"""Application layer for embedsearch.

Services here orchestrate the similarity kernel without direct filesystem
or network I/O. All side effects are delegated to adapters via port
interfaces.
"""

__all__ = [
    "DocumentMatch",
    "DocumentSearchService",
    "SimilaritySearchService",
]

from embedsearch.app.document_search import DocumentMatch, DocumentSearchService
from embedsearch.app.search_service import SimilaritySearchService
