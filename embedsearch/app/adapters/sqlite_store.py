"""SQLite-backed document store implementing DocumentStorePort."""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterable, Iterator
from pathlib import Path

from embedsearch.app.ports.document_store import DocumentRecord, DocumentStorePort
from embedsearch.core.vector import QuantizedVector
from embedsearch.errors import DimensionMismatch

logger = logging.getLogger(__name__)

# SQLite's default host-parameter limit is 999 on older builds.
_LOOKUP_CHUNK = 500

_SCHEMA = """
CREATE TABLE IF NOT EXISTS documents (
    document_id INTEGER PRIMARY KEY AUTOINCREMENT,
    owner_id INTEGER NOT NULL,
    title TEXT NOT NULL,
    body TEXT NOT NULL DEFAULT '',
    embedding_i8 BLOB NOT NULL
)
"""


class SQLiteDocumentStore(DocumentStorePort):
    """Persist documents and their int8 embeddings in a SQLite file.

    The connection is opened at construction and released by :meth:`close`
    (or on leaving a ``with`` block). Candidate scans stream rows from a
    cursor instead of loading the whole table.
    """

    def __init__(self, database_path: Path | str, *, dimension: int) -> None:
        self._path = database_path if database_path == ":memory:" else Path(database_path)
        self._dimension = int(dimension)
        if isinstance(self._path, Path):
            self._path.parent.mkdir(parents=True, exist_ok=True)
        self._conn: sqlite3.Connection | None = sqlite3.connect(str(self._path))
        self._init_schema()

    @property
    def database_path(self) -> Path | str:
        return self._path

    @property
    def dimension(self) -> int:
        return self._dimension

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise RuntimeError(f"Document store {self._path} is closed")
        return self._conn

    def _init_schema(self) -> None:
        conn = self._connection()
        conn.execute(_SCHEMA)
        conn.execute("CREATE INDEX IF NOT EXISTS idx_documents_owner ON documents(owner_id)")
        conn.commit()
        logger.debug("Document store ready at %s (dimension=%d)", self._path, self._dimension)

    def add(
        self,
        *,
        owner_id: int,
        title: str,
        body: str,
        embedding: QuantizedVector,
    ) -> int:
        if embedding.dimension != self._dimension:
            raise DimensionMismatch(
                f"Embedding for {title!r} has dimension {embedding.dimension}; "
                f"store expects {self._dimension}",
                expected=self._dimension,
                actual=embedding.dimension,
            )
        conn = self._connection()
        cursor = conn.execute(
            "INSERT INTO documents (owner_id, title, body, embedding_i8) VALUES (?, ?, ?, ?)",
            (owner_id, title, body, embedding.to_bytes()),
        )
        conn.commit()
        document_id = int(cursor.lastrowid)
        logger.debug("Stored document %d for owner %d", document_id, owner_id)
        return document_id

    def candidates(self, *, owner_id: int | None = None) -> Iterator[tuple[int, QuantizedVector]]:
        conn = self._connection()
        if owner_id is None:
            cursor = conn.execute(
                "SELECT document_id, embedding_i8 FROM documents ORDER BY document_id"
            )
        else:
            cursor = conn.execute(
                "SELECT document_id, embedding_i8 FROM documents "
                "WHERE owner_id = ? ORDER BY document_id",
                (owner_id,),
            )
        try:
            for document_id, blob in cursor:
                yield document_id, self._decode(document_id, blob)
        finally:
            cursor.close()

    def _decode(self, document_id: int, blob: bytes) -> QuantizedVector:
        try:
            return QuantizedVector.from_buffer(blob, self._dimension)
        except DimensionMismatch as exc:
            raise DimensionMismatch(
                f"Stored embedding for document {document_id} has "
                f"{exc.actual} components; expected {self._dimension}",
                expected=self._dimension,
                actual=exc.actual,
                candidate_id=document_id,
            ) from exc

    def get_many(self, document_ids: Iterable[int]) -> dict[int, DocumentRecord]:
        ids = list(dict.fromkeys(document_ids))
        conn = self._connection()
        found: dict[int, DocumentRecord] = {}
        for start in range(0, len(ids), _LOOKUP_CHUNK):
            chunk = ids[start : start + _LOOKUP_CHUNK]
            placeholders = ", ".join("?" for _ in chunk)
            rows = conn.execute(
                "SELECT document_id, owner_id, title, body, embedding_i8 FROM documents "
                f"WHERE document_id IN ({placeholders})",
                chunk,
            ).fetchall()
            for document_id, owner_id, title, body, blob in rows:
                found[document_id] = DocumentRecord(
                    document_id=document_id,
                    owner_id=owner_id,
                    title=title,
                    body=body,
                    embedding=bytes(blob),
                )
        return found

    def count(self, *, owner_id: int | None = None) -> int:
        conn = self._connection()
        if owner_id is None:
            row = conn.execute("SELECT COUNT(*) FROM documents").fetchone()
        else:
            row = conn.execute(
                "SELECT COUNT(*) FROM documents WHERE owner_id = ?", (owner_id,)
            ).fetchone()
        return int(row[0])

    def clear(self) -> None:
        conn = self._connection()
        conn.execute("DELETE FROM documents")
        conn.commit()
        logger.info("Cleared document store at %s", self._path)

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> SQLiteDocumentStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
