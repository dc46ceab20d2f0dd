"""Bounded top-k selection with deterministic tie ordering.

Results are ordered by ``(-score, index)`` where ``index`` is the position at
which a candidate entered the scan. Equal scores therefore keep their input
order, and partial results from independent shards can be merged into the
exact output a single sequential scan would produce.
"""

from __future__ import annotations

import heapq
from collections.abc import Hashable, Iterable
from dataclasses import dataclass
from typing import Any

from embedsearch.errors import InvalidArgument


@dataclass(frozen=True, slots=True)
class ScoredCandidate:
    """A candidate id paired with its similarity score."""

    id: Hashable
    score: int
    index: int = 0

    def sort_key(self) -> tuple[int, int]:
        return (-self.score, self.index)


def _require_positive(k: int) -> int:
    if isinstance(k, bool) or not isinstance(k, int):
        raise InvalidArgument(f"k must be an integer; got {k!r}")
    if k <= 0:
        raise InvalidArgument(f"k must be positive; got {k}")
    return k


class TopKSelector:
    """Retain the ``k`` highest-scoring entries of a stream.

    Uses a min-heap of capacity ``k``. A new entry replaces the current
    minimum only when its score is strictly greater, so on ties the
    earlier-seen entry is kept. O(n log k) time, O(k) space.

    Example:
        >>> selector = TopKSelector(2)
        >>> for doc_id, s in [("a", 1), ("b", 0), ("c", 1)]:
        ...     _ = selector.offer(doc_id, s)
        >>> [c.id for c in selector.drain()]
        ['a', 'c']
    """

    def __init__(self, k: int) -> None:
        self._k = _require_positive(k)
        # (score, -index, -sequence, id); the heap root is the entry to evict next
        self._heap: list[tuple[int, int, int, Any]] = []
        self._sequence = 0

    @property
    def k(self) -> int:
        return self._k

    def __len__(self) -> int:
        return len(self._heap)

    def min_score(self) -> int | None:
        """Lowest retained score, or None while the selector is empty."""
        return self._heap[0][0] if self._heap else None

    def offer(self, identifier: Hashable, score: int, index: int | None = None) -> bool:
        """Consider one entry; return True if it was retained."""
        sequence = self._sequence
        self._sequence += 1
        position = sequence if index is None else index
        entry = (score, -position, -sequence, identifier)

        if len(self._heap) < self._k:
            heapq.heappush(self._heap, entry)
            return True
        if score > self._heap[0][0]:
            heapq.heapreplace(self._heap, entry)
            return True
        return False

    def drain(self) -> list[ScoredCandidate]:
        """Return retained entries best-first and reset the selector."""
        ordered = sorted(self._heap, key=lambda e: (-e[0], -e[1], -e[2]))
        self._heap = []
        return [
            ScoredCandidate(id=identifier, score=s, index=-neg_index)
            for s, neg_index, _, identifier in ordered
        ]


def select(stream: Iterable[tuple[Hashable, int]], k: int) -> list[ScoredCandidate]:
    """Select the ``k`` best ``(id, score)`` pairs from ``stream``.

    Raises:
        InvalidArgument: if ``k <= 0``
    """
    selector = TopKSelector(k)
    for identifier, s in stream:
        selector.offer(identifier, s)
    return selector.drain()


def merge(partials: Iterable[Iterable[ScoredCandidate]], k: int) -> list[ScoredCandidate]:
    """Combine drained partial results into a single top-``k`` list."""
    _require_positive(k)
    combined = [candidate for partial in partials for candidate in partial]
    combined.sort(key=ScoredCandidate.sort_key)
    return combined[:k]
