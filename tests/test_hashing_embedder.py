from __future__ import annotations

import pytest

from embedsearch.app.adapters.hashing import HashingEmbedder
from embedsearch.core.scoring import score
from embedsearch.errors import InvalidArgument


def test_embeddings_have_configured_dimension() -> None:
    embedder = HashingEmbedder(dimension=96)

    vector = embedder.embed("Introduction to C#")

    assert embedder.dimension == 96
    assert vector.dimension == 96


def test_embedding_is_deterministic_across_instances() -> None:
    text = "Entity Framework Core Guide"

    assert HashingEmbedder(dimension=128).embed(text) == HashingEmbedder(dimension=128).embed(text)


def test_embedding_ignores_case_and_punctuation() -> None:
    embedder = HashingEmbedder(dimension=128)

    assert embedder.embed("Entity Framework!") == embedder.embed("entity   framework")


def test_shared_words_score_higher_than_unrelated_text() -> None:
    embedder = HashingEmbedder(dimension=256)
    query = embedder.embed("entity framework")

    related = embedder.embed("Entity Framework Core Guide")
    unrelated = embedder.embed("Getting Started with ASP.NET Core")

    assert score(query, related) > score(query, unrelated)


def test_empty_text_embeds_to_zero_vector() -> None:
    vector = HashingEmbedder(dimension=16).embed("   ")

    assert vector.tolist() == [0] * 16


def test_embed_many_preserves_order() -> None:
    embedder = HashingEmbedder(dimension=32)
    texts = ["alpha", "beta", "gamma"]

    assert embedder.embed_many(texts) == [embedder.embed(text) for text in texts]


def test_max_abs_scheme_reaches_full_range() -> None:
    vector = HashingEmbedder(dimension=64, scheme="max_abs").embed("quantized embeddings")

    assert max(abs(v) for v in vector.tolist()) == 127


def test_rejects_non_positive_dimension() -> None:
    with pytest.raises(InvalidArgument):
        HashingEmbedder(dimension=0)
