from __future__ import annotations

import pytest

from embedsearch.app.adapters import HashingEmbedder, SQLiteDocumentStore
from embedsearch.bootstrap import bootstrap_application


def test_bootstrap_wires_offline_defaults(override_settings) -> None:
    with bootstrap_application(override_settings) as container:
        assert isinstance(container.embedder, HashingEmbedder)
        assert isinstance(container.document_store, SQLiteDocumentStore)
        assert container.embedder.dimension == override_settings.dimension
        assert container.offline_gate.online_enabled is False
        assert override_settings.get_database_path().exists()


def test_bootstrap_refuses_online_embedder_when_offline(override_settings, monkeypatch) -> None:
    monkeypatch.delenv("EMBEDSEARCH_ONLINE", raising=False)
    settings = override_settings.model_copy(update={"embedder": "kanon2"})

    with pytest.raises(RuntimeError, match="online mode"):
        bootstrap_application(settings)


def test_bootstrap_honours_worker_settings(override_settings) -> None:
    settings = override_settings.model_copy(update={"search_workers": 3})

    with bootstrap_application(settings) as container:
        assert container.search_service.workers == 3
