"""Concrete adapters wiring application ports to built-in implementations."""

from __future__ import annotations

from .hashing import HashingEmbedder
from .kanon2 import Kanon2Embedder
from .memory_store import InMemoryDocumentStore
from .sqlite_store import SQLiteDocumentStore

__all__ = [
    "HashingEmbedder",
    "InMemoryDocumentStore",
    "Kanon2Embedder",
    "SQLiteDocumentStore",
]
