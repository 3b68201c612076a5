# src/circuitrag/configuration/storage/local.py
"""Local filesystem storage configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from circuitrag.configuration.base import StoreBundle


@dataclass(frozen=True)
class LocalStorage:
    """Local filesystem storage using SQLite and Chroma.

    All data is persisted to the specified directory:
    - documents.db: Documents and processing status (SQLite)
    - chunks.db: Chunks with their embeddings (SQLite)
    - knowledge.db: Knowledge base entries (SQLite)
    - topics.db: Learned technical topics (SQLite)
    - usage.db: Provider usage records (SQLite)
    - chroma/: Vector index over chunk embeddings (ChromaDB)

    Args:
        data_dir: Base directory for all storage files.
                  Created if it doesn't exist.
        use_vector_index: Set to False to skip Chroma; semantic search then
                          scores stored chunk embeddings locally.

    Example:
        storage = LocalStorage("./circuitrag_data")
        stores = storage.build_stores()
    """

    data_dir: str
    use_vector_index: bool = True

    def build_stores(self) -> StoreBundle:
        """Build all storage components.

        Creates the data directory if it doesn't exist.
        """
        from circuitrag.stores import (
            ChromaVectorIndex,
            SQLiteChunkStore,
            SQLiteDocumentStore,
            SQLiteKnowledgeStore,
            SQLiteTopicStore,
        )
        from circuitrag.usage import SQLiteUsageLogger

        Path(self.data_dir).mkdir(parents=True, exist_ok=True)

        vector_index = (
            ChromaVectorIndex(os.path.join(self.data_dir, "chroma"))
            if self.use_vector_index
            else None
        )
        return StoreBundle(
            documents=SQLiteDocumentStore(os.path.join(self.data_dir, "documents.db")),
            chunks=SQLiteChunkStore(os.path.join(self.data_dir, "chunks.db")),
            knowledge=SQLiteKnowledgeStore(os.path.join(self.data_dir, "knowledge.db")),
            topics=SQLiteTopicStore(os.path.join(self.data_dir, "topics.db")),
            vector_index=vector_index,
            usage_logger=SQLiteUsageLogger(os.path.join(self.data_dir, "usage.db")),
        )
