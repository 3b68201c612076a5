"""SQLite store for learned technical topics."""

import sqlite3
from datetime import datetime, timezone
from pathlib import Path

from circuitrag.stores.base import TopicStore


class SQLiteTopicStore(TopicStore):
    """Persist additional technical topics and how often queries mention them."""

    def __init__(self, db_path: str) -> None:
        self.db_path = db_path
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS technical_topics (
                    topic TEXT PRIMARY KEY,
                    usage_count INTEGER NOT NULL DEFAULT 0,
                    created_at TEXT NOT NULL
                )
            """)
            conn.commit()

    def get_additional_topics(self) -> list[str]:
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute("SELECT topic FROM technical_topics ORDER BY rowid")
            return [row[0] for row in cursor.fetchall()]

    def add_topic(self, topic: str) -> None:
        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                "INSERT OR IGNORE INTO technical_topics (topic, usage_count, created_at) "
                "VALUES (?, 0, ?)",
                (topic, datetime.now(timezone.utc).isoformat()),
            )
            conn.commit()

    def record_usage(self, topic: str) -> None:
        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                "UPDATE technical_topics SET usage_count = usage_count + 1 WHERE topic = ?",
                (topic,),
            )
            conn.commit()

    def usage_count(self, topic: str) -> int:
        """How many queries mentioned a learned topic (0 for base topics)."""
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute(
                "SELECT usage_count FROM technical_topics WHERE topic = ?", (topic,)
            )
            row = cursor.fetchone()
            return row[0] if row else 0
