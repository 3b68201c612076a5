"""Abstract base classes for storage.

The RAG core only relies on these signatures; persistence itself is an
opaque dependency.
"""

from abc import ABC, abstractmethod
from typing import Any

from circuitrag.models import Chunk, Document, DocumentStatus, KnowledgeEntry


def keyword_score(content: str, keywords: list[str]) -> float:
    """Fraction of keywords found (case-insensitively) in the content."""
    if not keywords:
        return 0.0
    lowered = content.lower()
    matched = sum(1 for keyword in keywords if keyword.lower() in lowered)
    return matched / len(keywords)


class DocumentStore(ABC):
    """Abstract base class for document storage."""

    @abstractmethod
    def put(self, document: Document) -> None:
        """Store a document, overwriting if it exists."""
        ...

    @abstractmethod
    def get(self, document_id: str) -> Document | None:
        """Retrieve a document by ID. Returns None if not found."""
        ...

    @abstractmethod
    def list_documents(self) -> list[Document]:
        """List every document in creation order."""
        ...

    @abstractmethod
    def get_training_documents(self) -> list[Document]:
        """List documents whose processing finished (completed or indexed)."""
        ...

    @abstractmethod
    def update_status(
        self,
        document_id: str,
        status: DocumentStatus,
        progress: int | None = None,
        error_message: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> Document | None:
        """Move a document to a new status. Metadata is merged, not replaced.

        Returns the updated document, or None if it does not exist.
        """
        ...

    @abstractmethod
    def delete(self, document_id: str) -> None:
        """Delete a document by ID."""
        ...

    def count_documents(self) -> int:
        """Count the total number of documents in the store."""
        return len(self.list_documents())


class ChunkStore(ABC):
    """Abstract base class for chunk storage."""

    @abstractmethod
    def create_document_chunk(self, chunk: Chunk) -> Chunk:
        """Persist one chunk and return it."""
        ...

    @abstractmethod
    def get_many(self, chunk_ids: list[str]) -> list[Chunk]:
        """Retrieve multiple chunks by ID, in the order given. Skips missing chunks."""
        ...

    @abstractmethod
    def get_document_chunks(self, document_id: str) -> list[Chunk]:
        """All chunks of a document, ordered by chunk_index."""
        ...

    @abstractmethod
    def get_document_chunks_by_language(self, language: str) -> list[Chunk]:
        """All chunks tagged with a language, in document then chunk order."""
        ...

    @abstractmethod
    def search_document_chunks_by_keywords(
        self,
        keywords: list[str],
        language: str,
        limit: int | None = None,
    ) -> list[tuple[Chunk, float]]:
        """Chunks containing at least one keyword, with a relevance score.

        The score is the fraction of keywords the chunk contains. Results are
        ordered by descending score; ties keep document then chunk order.
        """
        ...

    @abstractmethod
    def delete_by_document(self, document_id: str) -> int:
        """Delete all chunks of a document. Returns the number deleted."""
        ...

    @abstractmethod
    def count_chunks(self) -> int:
        """Count the total number of chunks in the store."""
        ...


class KnowledgeStore(ABC):
    """Abstract base class for knowledge base entries."""

    @abstractmethod
    def create_knowledge_entry(self, entry: KnowledgeEntry) -> KnowledgeEntry:
        """Persist a knowledge entry and return it."""
        ...

    @abstractmethod
    def list_entries(self, source_id: str | None = None) -> list[KnowledgeEntry]:
        """List entries, optionally only those created from one source."""
        ...

    @abstractmethod
    def delete_by_source(self, source_id: str) -> None:
        """Delete all entries created from a source."""
        ...


class TopicStore(ABC):
    """Persistence for learned technical topics."""

    @abstractmethod
    def get_additional_topics(self) -> list[str]:
        """Topics learned so far, in insertion order."""

    @abstractmethod
    def add_topic(self, topic: str) -> None:
        """Persist a new topic."""

    @abstractmethod
    def record_usage(self, topic: str) -> None:
        """Count one more query that mentioned the topic."""


class VectorIndex(ABC):
    """Optional vector-search collaborator.

    Returns pre-ranked matches above a similarity threshold. The pipeline
    works without one by scoring chunk embeddings locally.
    """

    @abstractmethod
    def add(self, chunks: list[Chunk]) -> None:
        """Index chunks that carry an embedding. Chunks without one are skipped."""
        ...

    @abstractmethod
    def match(
        self,
        embedding: list[float],
        threshold: float,
        count: int,
        language: str | None = None,
    ) -> list[tuple[str, float]]:
        """Return (chunk_id, similarity) pairs above threshold, best first."""
        ...

    @abstractmethod
    def delete_by_document(self, document_id: str) -> None:
        """Remove every indexed chunk of a document."""
        ...

    @abstractmethod
    def count(self) -> int:
        """Number of indexed chunks."""
        ...
