"""SQLite knowledge entry store."""

import sqlite3
from datetime import datetime
from pathlib import Path

from circuitrag.models import KnowledgeEntry
from circuitrag.stores.base import KnowledgeStore


class SQLiteKnowledgeStore(KnowledgeStore):
    """SQLite-based knowledge base."""

    def __init__(self, db_path: str) -> None:
        self.db_path = db_path
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS knowledge_entries (
                    id TEXT PRIMARY KEY,
                    content TEXT NOT NULL,
                    source_type TEXT NOT NULL,
                    source_id TEXT,
                    language TEXT NOT NULL,
                    verified INTEGER NOT NULL,
                    created_at TEXT NOT NULL
                )
            """)
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_source_id ON knowledge_entries(source_id)"
            )
            conn.commit()

    def create_knowledge_entry(self, entry: KnowledgeEntry) -> KnowledgeEntry:
        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO knowledge_entries
                    (id, content, source_type, source_id, language, verified, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    entry.id,
                    entry.content,
                    entry.source_type,
                    entry.source_id,
                    entry.language,
                    int(entry.verified),
                    entry.created_at.isoformat(),
                ),
            )
            conn.commit()
        return entry

    def list_entries(self, source_id: str | None = None) -> list[KnowledgeEntry]:
        query = (
            "SELECT id, content, source_type, source_id, language, verified, created_at "
            "FROM knowledge_entries"
        )
        params: tuple = ()
        if source_id is not None:
            query += " WHERE source_id = ?"
            params = (source_id,)
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute(query + " ORDER BY rowid", params)
            return [
                KnowledgeEntry(
                    id=row[0],
                    content=row[1],
                    source_type=row[2],
                    source_id=row[3],
                    language=row[4],
                    verified=bool(row[5]),
                    created_at=datetime.fromisoformat(row[6]),
                )
                for row in cursor.fetchall()
            ]

    def delete_by_source(self, source_id: str) -> None:
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("DELETE FROM knowledge_entries WHERE source_id = ?", (source_id,))
            conn.commit()
