"""SQLite chunk store implementation."""

import json
import sqlite3
from pathlib import Path

from circuitrag.models import Chunk
from circuitrag.stores.base import ChunkStore, keyword_score

_COLUMNS = (
    "id, document_id, chunk_index, content, content_hash, source_type, language, "
    "embedding, metadata"
)


def _row_to_chunk(row: tuple) -> Chunk:
    return Chunk(
        id=row[0],
        document_id=row[1],
        chunk_index=row[2],
        content=row[3],
        content_hash=row[4],
        source_type=row[5],
        language=row[6],
        embedding=json.loads(row[7]) if row[7] is not None else None,
        metadata=json.loads(row[8]),
    )


def _chunk_to_row(chunk: Chunk) -> tuple:
    return (
        chunk.id,
        chunk.document_id,
        chunk.chunk_index,
        chunk.content,
        chunk.content_hash,
        chunk.source_type,
        chunk.language,
        json.dumps(chunk.embedding) if chunk.embedding is not None else None,
        json.dumps(chunk.metadata),
    )


class SQLiteChunkStore(ChunkStore):
    """SQLite-based chunk store.

    Embeddings are stored as JSON arrays next to the chunk text so the
    retriever can score them locally when no vector index is configured.
    """

    def __init__(self, db_path: str) -> None:
        """Initialize the SQLite store."""
        self.db_path = db_path
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _init_db(self) -> None:
        """Create tables if they don't exist."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS chunks (
                    id TEXT PRIMARY KEY,
                    document_id TEXT NOT NULL,
                    chunk_index INTEGER NOT NULL,
                    content TEXT NOT NULL,
                    content_hash TEXT NOT NULL,
                    source_type TEXT NOT NULL,
                    language TEXT NOT NULL,
                    embedding TEXT,
                    metadata TEXT NOT NULL
                )
            """)
            conn.execute("CREATE INDEX IF NOT EXISTS idx_document ON chunks(document_id)")
            conn.execute("CREATE INDEX IF NOT EXISTS idx_language ON chunks(language)")
            conn.commit()

    def create_document_chunk(self, chunk: Chunk) -> Chunk:
        """Store a chunk, overwriting if exists."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                f"INSERT OR REPLACE INTO chunks ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
                _chunk_to_row(chunk),
            )
            conn.commit()
        return chunk

    def get_many(self, chunk_ids: list[str]) -> list[Chunk]:
        """Retrieve multiple chunks by ID, in the order given."""
        if not chunk_ids:
            return []
        placeholders = ",".join("?" * len(chunk_ids))
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute(
                f"SELECT {_COLUMNS} FROM chunks WHERE id IN ({placeholders})",
                chunk_ids,
            )
            by_id = {row[0]: _row_to_chunk(row) for row in cursor.fetchall()}
        return [by_id[chunk_id] for chunk_id in chunk_ids if chunk_id in by_id]

    def get_document_chunks(self, document_id: str) -> list[Chunk]:
        """All chunks of a document, ordered by chunk_index."""
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute(
                f"SELECT {_COLUMNS} FROM chunks WHERE document_id = ? ORDER BY chunk_index",
                (document_id,),
            )
            return [_row_to_chunk(row) for row in cursor.fetchall()]

    def get_document_chunks_by_language(self, language: str) -> list[Chunk]:
        """All chunks tagged with a language."""
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute(
                f"SELECT {_COLUMNS} FROM chunks WHERE language = ? "
                "ORDER BY rowid",
                (language,),
            )
            return [_row_to_chunk(row) for row in cursor.fetchall()]

    def search_document_chunks_by_keywords(
        self,
        keywords: list[str],
        language: str,
        limit: int | None = None,
    ) -> list[tuple[Chunk, float]]:
        """Chunks containing at least one keyword, scored by keyword coverage."""
        if not keywords:
            return []

        # SQLite LOWER() and LIKE only fold ASCII, so matching happens in Python
        chunks = self.get_document_chunks_by_language(language)
        scored = [(c, keyword_score(c.content, keywords)) for c in chunks]
        scored = [(c, s) for c, s in scored if s > 0]
        scored.sort(key=lambda pair: pair[1], reverse=True)
        return scored[:limit] if limit is not None else scored

    def delete_by_document(self, document_id: str) -> int:
        """Delete all chunks of a document."""
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute("DELETE FROM chunks WHERE document_id = ?", (document_id,))
            conn.commit()
            return cursor.rowcount

    def count_chunks(self) -> int:
        """Count the total number of chunks in the store."""
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute("SELECT COUNT(id) FROM chunks")
            count = cursor.fetchone()
            return count[0] if count else 0
