# src/circuitrag/usage.py
"""Provider usage logging.

Every chat, embedding or search call records one UsageRecord, successful or
not. Logging is fire-and-forget: a broken usage sink must never fail a query.
"""

import logging
import sqlite3
from abc import ABC, abstractmethod
from pathlib import Path

from circuitrag.models import UsageRecord

logger = logging.getLogger(__name__)


class UsageLogger(ABC):
    """Sink for provider usage records."""

    def log(self, record: UsageRecord) -> None:
        """Record one provider invocation. Never raises."""
        try:
            self.write(record)
        except Exception as e:
            logger.warning("Failed to record usage for %s: %s", record.model, e)

    @abstractmethod
    def write(self, record: UsageRecord) -> None:
        """Persist a record. May raise; log() guards the caller."""
        ...


class LoggingUsageLogger(UsageLogger):
    """Writes usage records to the standard logging system."""

    def __init__(self, level: int = logging.INFO) -> None:
        self.level = level

    def write(self, record: UsageRecord) -> None:
        logger.log(
            self.level,
            "usage model=%s operation=%s success=%s tokens=%d user=%s widget=%s%s",
            record.model,
            record.operation,
            record.success,
            record.tokens,
            record.user_id,
            record.widget_id,
            f" error={record.error_message}" if record.error_message else "",
        )


class InMemoryUsageLogger(UsageLogger):
    """Keeps records in a list. Mostly useful in tests."""

    def __init__(self) -> None:
        self.records: list[UsageRecord] = []

    def write(self, record: UsageRecord) -> None:
        self.records.append(record)


class SQLiteUsageLogger(UsageLogger):
    """SQLite-backed usage log."""

    def __init__(self, db_path: str) -> None:
        self.db_path = db_path
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS llm_usage (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    model TEXT NOT NULL,
                    operation TEXT NOT NULL,
                    success INTEGER NOT NULL,
                    user_id TEXT,
                    widget_id TEXT,
                    tokens INTEGER NOT NULL,
                    error_message TEXT,
                    created_at TEXT NOT NULL
                )
            """)
            conn.commit()

    def write(self, record: UsageRecord) -> None:
        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                """
                INSERT INTO llm_usage
                    (model, operation, success, user_id, widget_id, tokens,
                     error_message, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    record.model,
                    record.operation,
                    int(record.success),
                    record.user_id,
                    record.widget_id,
                    record.tokens,
                    record.error_message,
                    record.created_at.isoformat(),
                ),
            )
            conn.commit()

    def list_records(self) -> list[UsageRecord]:
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute(
                "SELECT model, operation, success, user_id, widget_id, tokens, "
                "error_message, created_at FROM llm_usage ORDER BY id"
            )
            return [
                UsageRecord(
                    model=row[0],
                    operation=row[1],
                    success=bool(row[2]),
                    user_id=row[3],
                    widget_id=row[4],
                    tokens=row[5],
                    error_message=row[6],
                    created_at=row[7],
                )
                for row in cursor.fetchall()
            ]

    def total_tokens(self) -> int:
        with sqlite3.connect(self.db_path) as conn:
            row = conn.execute("SELECT COALESCE(SUM(tokens), 0) FROM llm_usage").fetchone()
            return int(row[0])
