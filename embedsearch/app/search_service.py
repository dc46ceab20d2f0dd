"""Similarity search orchestration.

Scores every candidate against the query and keeps the best ``max_results``
with a :class:`~embedsearch.core.topk.TopKSelector`. The service holds no
per-call state and performs no I/O; candidates arrive from whatever iterable
the document store hands over.
"""

from __future__ import annotations

import math
from collections.abc import Hashable, Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor

from embedsearch.core.cancellation import CancellationToken
from embedsearch.core.scoring import score
from embedsearch.core.topk import ScoredCandidate, TopKSelector, merge
from embedsearch.core.vector import QuantizedVector
from embedsearch.errors import DimensionMismatch, InvalidArgument

Candidate = tuple[Hashable, QuantizedVector]


class SimilaritySearchService:
    """Find the candidates closest to a query vector.

    With ``workers > 1`` and at least ``shard_min_size`` candidates, the scan
    is split into contiguous shards scored on a thread pool, each with a
    private selector. Shard results are merged on the original candidate
    index, so the output is identical to a sequential scan.
    """

    def __init__(self, *, workers: int = 1, shard_min_size: int = 4096) -> None:
        if workers < 1:
            raise InvalidArgument(f"workers must be at least 1; got {workers}")
        if shard_min_size < 1:
            raise InvalidArgument(f"shard_min_size must be at least 1; got {shard_min_size}")
        self._workers = workers
        self._shard_min_size = shard_min_size

    @property
    def workers(self) -> int:
        return self._workers

    def find_closest(
        self,
        query: QuantizedVector,
        candidates: Iterable[Candidate],
        max_results: int,
        *,
        min_score: int | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> list[Hashable]:
        """Return ids of the ``max_results`` best candidates, best first.

        Args:
            query: Query vector (read-only)
            candidates: ``(id, vector)`` pairs; ids should be unique per call
            max_results: Positive result cap
            min_score: Drop candidates scoring below this value
            cancel_token: Checked between candidates

        Raises:
            InvalidArgument: ``max_results`` is not positive
            DimensionMismatch: a candidate's dimension differs from the query's
            Cancelled: ``cancel_token`` was cancelled mid-scan
        """
        hits = self.find_closest_scored(
            query,
            candidates,
            max_results,
            min_score=min_score,
            cancel_token=cancel_token,
        )
        return [hit.id for hit in hits]

    def find_closest_scored(
        self,
        query: QuantizedVector,
        candidates: Iterable[Candidate],
        max_results: int,
        *,
        min_score: int | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> list[ScoredCandidate]:
        """Same as :meth:`find_closest` but keeps the scores."""
        if isinstance(max_results, bool) or not isinstance(max_results, int) or max_results <= 0:
            raise InvalidArgument(f"max_results must be a positive integer; got {max_results!r}")

        if self._workers == 1:
            return _scan(query, candidates, max_results, 0, min_score, cancel_token)

        items: Sequence[Candidate] = (
            candidates if isinstance(candidates, Sequence) else list(candidates)
        )
        if len(items) < self._shard_min_size:
            return _scan(query, items, max_results, 0, min_score, cancel_token)
        return self._scan_sharded(query, items, max_results, min_score, cancel_token)

    def _scan_sharded(
        self,
        query: QuantizedVector,
        items: Sequence[Candidate],
        max_results: int,
        min_score: int | None,
        cancel_token: CancellationToken | None,
    ) -> list[ScoredCandidate]:
        shard_size = math.ceil(len(items) / self._workers)
        bounds = [
            (start, min(start + shard_size, len(items)))
            for start in range(0, len(items), shard_size)
        ]

        with ThreadPoolExecutor(max_workers=self._workers) as executor:
            futures = [
                executor.submit(
                    _scan,
                    query,
                    items[start:end],
                    max_results,
                    start,
                    min_score,
                    cancel_token,
                )
                for start, end in bounds
            ]
            # Collect in shard order so the earliest failing candidate is reported.
            partials = [future.result() for future in futures]

        return merge(partials, max_results)


def _scan(
    query: QuantizedVector,
    candidates: Iterable[Candidate],
    k: int,
    offset: int,
    min_score: int | None,
    cancel_token: CancellationToken | None,
) -> list[ScoredCandidate]:
    selector = TopKSelector(k)
    for position, (identifier, vector) in enumerate(candidates, start=offset):
        if cancel_token is not None:
            cancel_token.raise_if_cancelled()
        if vector.dimension != query.dimension:
            raise DimensionMismatch(
                f"Candidate {identifier!r} has dimension {vector.dimension}; "
                f"query has {query.dimension}",
                expected=query.dimension,
                actual=vector.dimension,
                candidate_id=identifier,
            )
        similarity = score(query, vector)
        if min_score is not None and similarity < min_score:
            continue
        selector.offer(identifier, similarity, position)
    return selector.drain()
