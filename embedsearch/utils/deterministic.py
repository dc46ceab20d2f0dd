"""Determinism checks for reproducible search output.

Public helper: ``embedsearch doctor`` uses it to confirm the configured
embedder honours the same-text-same-vector contract, and callers can use it
to check their own search pipelines.
"""

from collections.abc import Callable
from typing import Any


def verify_determinism(func: Callable[[], Any], runs: int = 3) -> bool:
    """Return True if ``func`` produces identical output on every run.

    Example:
        >>> assert verify_determinism(lambda: service.find_closest(q, docs, 5))
    """
    first_result = func()
    return all(func() == first_result for _ in range(runs - 1))
