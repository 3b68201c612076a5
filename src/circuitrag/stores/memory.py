"""In-memory store implementations.

Handy for tests and for short-lived pipelines that don't need persistence.
"""

from datetime import datetime, timezone
from typing import Any

from circuitrag.models import TRAINED_STATUSES, Chunk, Document, DocumentStatus, KnowledgeEntry
from circuitrag.similarity import rank_by_similarity
from circuitrag.stores.base import (
    ChunkStore,
    DocumentStore,
    KnowledgeStore,
    TopicStore,
    VectorIndex,
    keyword_score,
)


class InMemoryDocumentStore(DocumentStore):
    def __init__(self) -> None:
        self._documents: dict[str, Document] = {}

    def put(self, document: Document) -> None:
        self._documents[document.id] = document

    def get(self, document_id: str) -> Document | None:
        return self._documents.get(document_id)

    def list_documents(self) -> list[Document]:
        return list(self._documents.values())

    def get_training_documents(self) -> list[Document]:
        return [d for d in self._documents.values() if d.status in TRAINED_STATUSES]

    def update_status(
        self,
        document_id: str,
        status: DocumentStatus,
        progress: int | None = None,
        error_message: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> Document | None:
        document = self._documents.get(document_id)
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
        self._documents[document_id] = updated
        return updated

    def delete(self, document_id: str) -> None:
        self._documents.pop(document_id, None)


class InMemoryChunkStore(ChunkStore):
    def __init__(self) -> None:
        self._chunks: dict[str, Chunk] = {}

    def create_document_chunk(self, chunk: Chunk) -> Chunk:
        self._chunks[chunk.id] = chunk
        return chunk

    def get_many(self, chunk_ids: list[str]) -> list[Chunk]:
        return [self._chunks[cid] for cid in chunk_ids if cid in self._chunks]

    def get_document_chunks(self, document_id: str) -> list[Chunk]:
        chunks = [c for c in self._chunks.values() if c.document_id == document_id]
        return sorted(chunks, key=lambda c: c.chunk_index)

    def get_document_chunks_by_language(self, language: str) -> list[Chunk]:
        return [c for c in self._chunks.values() if c.language == language]

    def search_document_chunks_by_keywords(
        self,
        keywords: list[str],
        language: str,
        limit: int | None = None,
    ) -> list[tuple[Chunk, float]]:
        if not keywords:
            return []
        scored = [
            (c, keyword_score(c.content, keywords))
            for c in self.get_document_chunks_by_language(language)
        ]
        scored = [(c, s) for c, s in scored if s > 0]
        scored.sort(key=lambda pair: pair[1], reverse=True)
        return scored[:limit] if limit is not None else scored

    def delete_by_document(self, document_id: str) -> int:
        doomed = [cid for cid, c in self._chunks.items() if c.document_id == document_id]
        for cid in doomed:
            del self._chunks[cid]
        return len(doomed)

    def count_chunks(self) -> int:
        return len(self._chunks)


class InMemoryKnowledgeStore(KnowledgeStore):
    def __init__(self) -> None:
        self._entries: list[KnowledgeEntry] = []

    def create_knowledge_entry(self, entry: KnowledgeEntry) -> KnowledgeEntry:
        self._entries.append(entry)
        return entry

    def list_entries(self, source_id: str | None = None) -> list[KnowledgeEntry]:
        if source_id is None:
            return list(self._entries)
        return [e for e in self._entries if e.source_id == source_id]

    def delete_by_source(self, source_id: str) -> None:
        self._entries = [e for e in self._entries if e.source_id != source_id]


class InMemoryTopicStore(TopicStore):
    def __init__(self, topics: list[str] | None = None) -> None:
        self.topics: list[str] = list(topics or [])
        self.usage: dict[str, int] = {}

    def get_additional_topics(self) -> list[str]:
        return list(self.topics)

    def add_topic(self, topic: str) -> None:
        if topic not in self.topics:
            self.topics.append(topic)

    def record_usage(self, topic: str) -> None:
        self.usage[topic] = self.usage.get(topic, 0) + 1


class InMemoryVectorIndex(VectorIndex):
    """Brute-force cosine index."""

    def __init__(self) -> None:
        self._entries: dict[str, tuple[Chunk, list[float]]] = {}

    def add(self, chunks: list[Chunk]) -> None:
        for chunk in chunks:
            if chunk.embedding:
                self._entries[chunk.id] = (chunk, chunk.embedding)

    def match(
        self,
        embedding: list[float],
        threshold: float,
        count: int,
        language: str | None = None,
    ) -> list[tuple[str, float]]:
        vectors = [
            (chunk_id, vector)
            for chunk_id, (chunk, vector) in self._entries.items()
            if language is None or chunk.language == language
        ]
        return rank_by_similarity(embedding, vectors, threshold, count)

    def delete_by_document(self, document_id: str) -> None:
        doomed = [cid for cid, (c, _) in self._entries.items() if c.document_id == document_id]
        for cid in doomed:
            del self._entries[cid]

    def count(self) -> int:
        return len(self._entries)
