# src/circuitrag/stores/__init__.py
"""Storage abstractions for circuitrag."""

from circuitrag.stores.base import (
    ChunkStore,
    DocumentStore,
    KnowledgeStore,
    TopicStore,
    VectorIndex,
    keyword_score,
)
from circuitrag.stores.chroma import ChromaVectorIndex
from circuitrag.stores.memory import (
    InMemoryChunkStore,
    InMemoryDocumentStore,
    InMemoryKnowledgeStore,
    InMemoryTopicStore,
    InMemoryVectorIndex,
)
from circuitrag.stores.sqlite_chunk import SQLiteChunkStore
from circuitrag.stores.sqlite_document import SQLiteDocumentStore
from circuitrag.stores.sqlite_knowledge import SQLiteKnowledgeStore
from circuitrag.stores.sqlite_topic import SQLiteTopicStore

__all__ = [
    "DocumentStore",
    "ChunkStore",
    "KnowledgeStore",
    "TopicStore",
    "VectorIndex",
    "keyword_score",
    "SQLiteDocumentStore",
    "SQLiteChunkStore",
    "SQLiteKnowledgeStore",
    "SQLiteTopicStore",
    "ChromaVectorIndex",
    "InMemoryDocumentStore",
    "InMemoryChunkStore",
    "InMemoryKnowledgeStore",
    "InMemoryTopicStore",
    "InMemoryVectorIndex",
]
