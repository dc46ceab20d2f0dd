"""Utility modules for common operations."""

from embedsearch.utils.deterministic import verify_determinism
from embedsearch.utils.offline import OfflineModeGate

__all__ = [
    "OfflineModeGate",
    "verify_determinism",
]
