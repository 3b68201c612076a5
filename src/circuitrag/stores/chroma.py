# src/circuitrag/stores/chroma.py
"""ChromaDB vector index for chunk embeddings."""

import logging
from pathlib import Path

import chromadb

from circuitrag.models import Chunk
from circuitrag.stores.base import VectorIndex

logger = logging.getLogger(__name__)


class ChromaVectorIndex(VectorIndex):
    """ChromaDB-based index over chunk embeddings (cosine space)."""

    def __init__(self, persist_dir: str, collection_name: str = "circuitrag") -> None:
        Path(persist_dir).mkdir(parents=True, exist_ok=True)
        self._client = chromadb.PersistentClient(path=persist_dir)
        self._collection = self._client.get_or_create_collection(
            name=collection_name,
            metadata={"hnsw:space": "cosine"},
        )

    def close(self) -> None:
        """Close the index and release resources.

        ChromaDB doesn't have an official close method, so we call the internal
        _system.stop() to release file handles. Test suites that open many
        indexes otherwise run out of file descriptors.
        """
        self._collection = None  # type: ignore[assignment]

        try:
            if self._client is not None and hasattr(self._client, "_system"):
                self._client._system.stop()
        except Exception as e:
            logger.debug("Ignoring error while stopping chroma client: %s", e)

        self._client = None  # type: ignore[assignment]

    def add(self, chunks: list[Chunk]) -> None:
        embedded = [c for c in chunks if c.embedding]
        if not embedded:
            return

        self._collection.upsert(
            ids=[c.id for c in embedded],
            embeddings=[c.embedding for c in embedded],  # type: ignore[misc]
            metadatas=[
                {
                    "document_id": c.document_id,
                    "chunk_index": c.chunk_index,
                    "language": c.language,
                }
                for c in embedded
            ],
        )

    def match(
        self,
        embedding: list[float],
        threshold: float,
        count: int,
        language: str | None = None,
    ) -> list[tuple[str, float]]:
        total = self._collection.count()
        if total == 0 or count <= 0:
            return []

        results = self._collection.query(
            query_embeddings=[embedding],  # type: ignore[arg-type]
            n_results=min(count, total),
            where={"language": language} if language else None,
            include=["distances"],
        )

        matches = []
        ids = results["ids"][0]
        distances = results["distances"][0]  # type: ignore[index]
        for chunk_id, dist in zip(ids, distances, strict=True):
            # Cosine distance: similarity = 1 - distance
            score = 1.0 - dist
            if score > threshold:
                matches.append((chunk_id, score))

        matches.sort(key=lambda pair: pair[1], reverse=True)
        return matches

    def delete_by_document(self, document_id: str) -> None:
        self._collection.delete(where={"document_id": document_id})

    def count(self) -> int:
        return self._collection.count()
