"""Port interfaces for the embedsearch application layer.

The search service depends on these protocols, never on concrete adapters.
"""

__all__ = [
    "DocumentRecord",
    "DocumentStorePort",
    "EmbeddingPort",
]

from embedsearch.app.ports.document_store import DocumentRecord, DocumentStorePort
from embedsearch.app.ports.embedding import EmbeddingPort
