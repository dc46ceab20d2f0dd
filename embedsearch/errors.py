"""Error taxonomy for similarity search.

All core errors derive from :class:`VectorSearchError` and are raised
synchronously to the caller. None of them are transient, so nothing in the
core retries.
"""

from __future__ import annotations

from typing import Any


class VectorSearchError(Exception):
    """Base class for similarity search failures."""

    pass


class DimensionMismatch(VectorSearchError, ValueError):
    """Raised when a vector's length disagrees with the expected dimension."""

    def __init__(
        self,
        message: str,
        *,
        expected: int | None = None,
        actual: int | None = None,
        candidate_id: Any = None,
    ) -> None:
        super().__init__(message)
        self.expected = expected
        self.actual = actual
        self.candidate_id = candidate_id


class InvalidArgument(VectorSearchError, ValueError):
    """Raised for out-of-range arguments such as a non-positive ``k``."""

    pass


class Cancelled(VectorSearchError):
    """Raised when a scan observes a cancellation request."""

    pass
