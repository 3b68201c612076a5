"""SQLite document store implementation."""

import json
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from circuitrag.models import TRAINED_STATUSES, Document, DocumentStatus
from circuitrag.stores.base import DocumentStore

_COLUMNS = (
    "id, name, content, document_type, status, progress, role, language, "
    "error_message, metadata, created_at, updated_at"
)


def _row_to_document(row: tuple) -> Document:
    return Document(
        id=row[0],
        name=row[1],
        content=row[2],
        document_type=row[3],
        status=row[4],
        progress=row[5],
        role=row[6],
        language=row[7],
        error_message=row[8],
        metadata=json.loads(row[9]),
        created_at=datetime.fromisoformat(row[10]),
        updated_at=datetime.fromisoformat(row[11]),
    )


class SQLiteDocumentStore(DocumentStore):
    """SQLite-based document store."""

    def __init__(self, db_path: str) -> None:
        """Initialize the SQLite store."""
        self.db_path = db_path
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _init_db(self) -> None:
        """Create tables if they don't exist."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS documents (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    content TEXT NOT NULL,
                    document_type TEXT NOT NULL,
                    status TEXT NOT NULL,
                    progress INTEGER,
                    role TEXT,
                    language TEXT NOT NULL,
                    error_message TEXT,
                    metadata TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            conn.execute("CREATE INDEX IF NOT EXISTS idx_status ON documents(status)")
            conn.commit()

    def put(self, document: Document) -> None:
        """Store a document, overwriting if exists."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                f"INSERT OR REPLACE INTO documents ({_COLUMNS}) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    document.id,
                    document.name,
                    document.content,
                    document.document_type.value,
                    document.status.value,
                    document.progress,
                    document.role.value if document.role else None,
                    document.language,
                    document.error_message,
                    json.dumps(document.metadata),
                    document.created_at.isoformat(),
                    document.updated_at.isoformat(),
                ),
            )
            conn.commit()

    def get(self, document_id: str) -> Document | None:
        """Retrieve a document by ID."""
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute(
                f"SELECT {_COLUMNS} FROM documents WHERE id = ?",
                (document_id,),
            )
            row = cursor.fetchone()
            return _row_to_document(row) if row else None

    def list_documents(self) -> list[Document]:
        """List every document in creation order."""
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute(
                f"SELECT {_COLUMNS} FROM documents ORDER BY created_at, rowid"
            )
            return [_row_to_document(row) for row in cursor.fetchall()]

    def get_training_documents(self) -> list[Document]:
        """List documents whose processing finished."""
        statuses = [s.value for s in TRAINED_STATUSES]
        placeholders = ",".join("?" * len(statuses))
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute(
                f"SELECT {_COLUMNS} FROM documents WHERE status IN ({placeholders}) "
                "ORDER BY created_at, rowid",
                statuses,
            )
            return [_row_to_document(row) for row in cursor.fetchall()]

    def update_status(
        self,
        document_id: str,
        status: DocumentStatus,
        progress: int | None = None,
        error_message: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> Document | None:
        """Move a document to a new status, merging metadata."""
        document = self.get(document_id)
        if document is None:
            return None

        updated = document.model_copy(
            update={
                "status": status,
                "progress": progress,
                "error_message": error_message,
                "metadata": {**document.metadata, **(metadata or {})},
                "updated_at": datetime.now(timezone.utc),
            }
        )
        self.put(updated)
        return updated

    def delete(self, document_id: str) -> None:
        """Delete a document by ID."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("DELETE FROM documents WHERE id = ?", (document_id,))
            conn.commit()

    def count_documents(self) -> int:
        """Count the total number of documents in the store."""
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute("SELECT COUNT(id) FROM documents")
            count = cursor.fetchone()
            return count[0] if count else 0
