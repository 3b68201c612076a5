# src/circuitrag/configuration/base.py
"""Protocol definitions for configuration objects.

These protocols define the interfaces for provider and storage configurations.
Implementations use @dataclass(frozen=True) for immutability.

Protocols give structural typing for configuration factories: any frozen
dataclass with the right methods satisfies the interface without
inheritance. The stores themselves (stores/base.py) are ABCs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from circuitrag.embedder import Embedder
    from circuitrag.external import KnowledgeSource
    from circuitrag.generation import AnswerGenerator
    from circuitrag.settings import Settings
    from circuitrag.stores import (
        ChunkStore,
        DocumentStore,
        KnowledgeStore,
        TopicStore,
        VectorIndex,
    )
    from circuitrag.usage import UsageLogger


@dataclass
class StoreBundle:
    """Every store the pipeline needs, built together by a StorageConfig.

    Attributes:
        documents: Documents and their processing status
        chunks: Chunk text, metadata and embeddings
        knowledge: One summary entry per processed document
        topics: Learned technical topics
        vector_index: Optional vector search over chunk embeddings
        usage_logger: Sink for provider usage records
    """

    documents: DocumentStore
    chunks: ChunkStore
    knowledge: KnowledgeStore
    topics: TopicStore
    vector_index: VectorIndex | None
    usage_logger: UsageLogger

    def close(self) -> None:
        """Release resources held by stores that keep files open."""
        close = getattr(self.vector_index, "close", None)
        if callable(close):
            close()


@runtime_checkable
class ProviderConfig(Protocol):
    """Protocol for provider configurations.

    Provider configurations build the AI components:
    - Embedder: Creates vector embeddings for chunks and queries
    - AnswerGenerator: Produces answers with provider fallback
    - Knowledge sources: External lookups used when the corpus can't answer
    """

    def build_embedder(
        self, settings: Settings, usage_logger: UsageLogger | None = None
    ) -> Embedder:
        """Build an embedder for creating vector embeddings."""
        ...

    def build_generator(
        self, settings: Settings, usage_logger: UsageLogger | None = None
    ) -> AnswerGenerator:
        """Build the answer generator.

        Args:
            settings: Settings containing temperatures, token cap and fallback models.
            usage_logger: Where every provider call is recorded.
        """
        ...

    def build_knowledge_sources(self) -> list[KnowledgeSource]:
        """Build the external knowledge sources, in the order they are tried."""
        ...


@runtime_checkable
class StorageConfig(Protocol):
    """Protocol for storage configurations.

    Example implementation:
        @dataclass(frozen=True)
        class LocalStorage:
            data_dir: str

            def build_stores(self) -> StoreBundle: ...
    """

    def build_stores(self) -> StoreBundle:
        """Build all storage components."""
        ...
