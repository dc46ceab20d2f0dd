"""Application bootstrap wiring ports, adapters, and services."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from embedsearch.app import DocumentSearchService, SimilaritySearchService
from embedsearch.app.adapters import HashingEmbedder, Kanon2Embedder, SQLiteDocumentStore
from embedsearch.app.ports import DocumentStorePort, EmbeddingPort
from embedsearch.config import Settings, get_settings
from embedsearch.utils.offline import OfflineModeGate

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ApplicationContainer:
    """Aggregates wired services and adapters for the CLI layer."""

    settings: Settings
    offline_gate: OfflineModeGate
    embedder: EmbeddingPort
    document_store: DocumentStorePort
    search_service: SimilaritySearchService
    document_search: DocumentSearchService

    def close(self) -> None:
        """Release the document store connection."""
        self.document_store.close()

    def __enter__(self) -> ApplicationContainer:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def create_embedder(settings: Settings, offline_gate: OfflineModeGate) -> EmbeddingPort:
    """Instantiate the embedder named by ``settings.embedder``."""
    if settings.embedder == "kanon2":
        return Kanon2Embedder(
            offline_gate=offline_gate,
            dimension=settings.dimension,
            scheme=settings.quantization,
            api_key=settings.get_isaacus_api_key(),
            api_base=settings.isaacus_api_base,
        )
    return HashingEmbedder(dimension=settings.dimension, scheme=settings.quantization)


def bootstrap_application(settings: Settings | None = None) -> ApplicationContainer:
    """Create the application container using configured adapters."""

    active_settings = settings or get_settings()
    offline_gate = OfflineModeGate.from_settings(active_settings)

    embedder = create_embedder(active_settings, offline_gate)
    if embedder.dimension != active_settings.dimension:
        raise ValueError(
            f"Embedder produces {embedder.dimension}-dimensional vectors; "
            f"settings require {active_settings.dimension}"
        )

    document_store = SQLiteDocumentStore(
        active_settings.get_database_path(),
        dimension=active_settings.dimension,
    )
    search_service = SimilaritySearchService(
        workers=active_settings.search_workers,
        shard_min_size=active_settings.shard_min_size,
    )
    document_search = DocumentSearchService(
        embedder=embedder,
        document_store=document_store,
        search_service=search_service,
    )
    logger.debug(
        "Bootstrapped embedder=%s dimension=%d workers=%d",
        active_settings.embedder,
        active_settings.dimension,
        active_settings.search_workers,
    )

    return ApplicationContainer(
        settings=active_settings,
        offline_gate=offline_gate,
        embedder=embedder,
        document_store=document_store,
        search_service=search_service,
        document_search=document_search,
    )
