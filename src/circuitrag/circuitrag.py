# src/circuitrag/circuitrag.py
"""Central configuration class for circuitrag."""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, cast

if TYPE_CHECKING:
    from circuitrag.configuration import ProviderConfig, StorageConfig
    from circuitrag.external import ExternalSearchChain
    from circuitrag.ingestor import DocumentProcessor, ProcessingResult, ProgressCallback
    from circuitrag.loaders import LoaderRegistry
    from circuitrag.orchestrator import RAGOrchestrator
    from circuitrag.retriever import HybridRetriever
    from circuitrag.stores import (
        ChunkStore,
        DocumentStore,
        KnowledgeStore,
        TopicStore,
        VectorIndex,
    )
    from circuitrag.usage import UsageLogger

from circuitrag.exceptions import DocumentNotFoundError
from circuitrag.models import Document, DocumentRole, DocumentType, QueryResponse
from circuitrag.settings import Settings

logger = logging.getLogger(__name__)


class CircuitRAG:
    """Central configuration for circuitrag stores and components.

    CircuitRAG bundles the stores and AI components together so you can
    configure once and then ingest documents and answer questions.

    There are two ways to create a CircuitRAG instance:

    1. With a storage bundle (developer-friendly):

        from circuitrag import CircuitRAG, LiteLLMProvider, LocalStorage

        rag = CircuitRAG(
            provider=LiteLLMProvider(llm="openai/gpt-4o"),
            storage=LocalStorage("./circuitrag_data"),
        )
        await rag.ingest_file("manual-x.pdf", role=DocumentRole.REFERENCE)
        response = await rag.query("Qual a tensão do VS1?")

    2. With explicit stores:

        from circuitrag.stores import SQLiteChunkStore, SQLiteDocumentStore

        rag = CircuitRAG.from_stores(
            provider=LiteLLMProvider(),
            document_store=SQLiteDocumentStore("./data/documents.db"),
            chunk_store=SQLiteChunkStore("./data/chunks.db"),
        )
    """

    def __init__(
        self,
        *,
        provider: ProviderConfig,
        # EITHER storage bundle...
        storage: StorageConfig | None = None,
        # ...OR explicit stores
        document_store: DocumentStore | None = None,
        chunk_store: ChunkStore | None = None,
        knowledge_store: KnowledgeStore | None = None,
        topic_store: TopicStore | None = None,
        vector_index: VectorIndex | None = None,
        usage_logger: UsageLogger | None = None,
        # Common
        settings: Settings | None = None,
        loader_registry: LoaderRegistry | None = None,
        behavior_instructions: str | None = None,
    ) -> None:
        """Create a CircuitRAG instance.

        Args:
            provider: Provider configuration (builds embedder, generator and
                      external knowledge sources).
            storage: Storage bundle (convenience). Mutually exclusive with explicit stores.
                     Example: LocalStorage("./circuitrag_data")
            document_store: Explicit document store. Requires chunk_store.
            chunk_store: Explicit chunk store.
            knowledge_store: Optional explicit knowledge store.
            topic_store: Optional store for learned technical topics.
            vector_index: Optional vector index over chunk embeddings.
            usage_logger: Optional usage sink. Defaults to logging.
            settings: Behavioral settings (chunk sizes, limits, thresholds, ...)
            loader_registry: Optional loader registry for file loading. If None, uses default.
            behavior_instructions: Operator text prepended to every answer prompt.

        Raises:
            ValueError: If neither a storage bundle nor the document and chunk
                       stores are provided, or if both are provided.
        """
        self._settings = settings if settings is not None else Settings()

        # Path 1: Storage bundle (convenience)
        if storage is not None:
            if any([document_store, chunk_store, knowledge_store, topic_store, vector_index]):
                raise ValueError("Cannot mix 'storage' bundle with explicit stores")
            stores = storage.build_stores()
            self.document_store = stores.documents
            self.chunk_store = stores.chunks
            self.knowledge_store: KnowledgeStore | None = stores.knowledge
            self.topic_store: TopicStore | None = stores.topics
            self.vector_index = stores.vector_index
            self.usage_logger = usage_logger or stores.usage_logger

        # Path 2: Explicit stores
        elif document_store is not None and chunk_store is not None:
            self.document_store = cast("DocumentStore", document_store)
            self.chunk_store = cast("ChunkStore", chunk_store)
            self.knowledge_store = knowledge_store
            self.topic_store = topic_store
            self.vector_index = vector_index
            if usage_logger is None:
                from circuitrag.usage import LoggingUsageLogger

                usage_logger = LoggingUsageLogger()
            self.usage_logger = usage_logger

        else:
            raise ValueError(
                "Must provide either 'storage' bundle or explicit stores "
                "(at least document_store and chunk_store)"
            )

        self._provider = provider
        self.embedder = provider.build_embedder(self._settings, self.usage_logger)
        self.generator = provider.build_generator(self._settings, self.usage_logger)
        self.behavior_instructions = behavior_instructions

        self._loader_registry = loader_registry
        self._external_search: ExternalSearchChain | None = None

    @classmethod
    def from_stores(
        cls,
        *,
        provider: ProviderConfig,
        document_store: DocumentStore,
        chunk_store: ChunkStore,
        knowledge_store: KnowledgeStore | None = None,
        topic_store: TopicStore | None = None,
        vector_index: VectorIndex | None = None,
        usage_logger: UsageLogger | None = None,
        settings: Settings | None = None,
        loader_registry: LoaderRegistry | None = None,
        behavior_instructions: str | None = None,
    ) -> CircuitRAG:
        """Create CircuitRAG with explicit stores.

        This is the explicit alternative to using a StorageConfig bundle,
        e.g. in-memory stores for tests or a shared document store.
        """
        return cls(
            provider=provider,
            document_store=document_store,
            chunk_store=chunk_store,
            knowledge_store=knowledge_store,
            topic_store=topic_store,
            vector_index=vector_index,
            usage_logger=usage_logger,
            settings=settings,
            loader_registry=loader_registry,
            behavior_instructions=behavior_instructions,
        )

    @property
    def settings(self) -> Settings:
        return self._settings

    def _get_loader_registry(self) -> LoaderRegistry:
        """Get or create the loader registry."""
        if self._loader_registry is None:
            from circuitrag.loaders import LoaderRegistry

            self._loader_registry = LoaderRegistry.default()
        return self._loader_registry

    def retriever(self) -> HybridRetriever:
        """Create a HybridRetriever over this instance's stores."""
        from circuitrag.retriever import HybridRetriever

        return HybridRetriever(
            chunk_store=self.chunk_store,
            embedder=self.embedder,
            document_store=self.document_store,
            vector_index=self.vector_index,
            settings=self._settings,
        )

    def processor(self) -> DocumentProcessor:
        """Create a DocumentProcessor writing to this instance's stores."""
        from circuitrag.ingestor import DocumentProcessor

        return DocumentProcessor(
            document_store=self.document_store,
            chunk_store=self.chunk_store,
            embedder=self.embedder,
            knowledge_store=self.knowledge_store,
            vector_index=self.vector_index,
            settings=self._settings,
        )

    def external_search(self) -> ExternalSearchChain:
        """The external search chain (built once, so learned topics are shared)."""
        if self._external_search is None:
            from circuitrag.external import ExternalSearchChain, TopicCache

            self._external_search = ExternalSearchChain(
                sources=self._provider.build_knowledge_sources(),
                topics=TopicCache(self.topic_store),
                usage_logger=self.usage_logger,
            )
        return self._external_search

    def orchestrator(self, *, use_external_search: bool = True) -> RAGOrchestrator:
        """Create a RAGOrchestrator.

        Args:
            use_external_search: Allow answer verification to consult external
                sources. Also requires settings.external_search_enabled.
        """
        from circuitrag.orchestrator import RAGOrchestrator

        external = (
            self.external_search()
            if use_external_search and self._settings.external_search_enabled
            else None
        )
        return RAGOrchestrator(
            document_store=self.document_store,
            retriever=self.retriever(),
            generator=self.generator,
            external_search=external,
            settings=self._settings,
            behavior_instructions=self.behavior_instructions,
        )

    async def add_document(
        self,
        name: str,
        content: str,
        *,
        document_type: DocumentType = DocumentType.TEXT,
        role: DocumentRole | None = DocumentRole.REFERENCE,
        language: str | None = None,
        metadata: dict[str, Any] | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> ProcessingResult:
        """Store a document and run it through the processing pipeline.

        Args:
            name: Display name shown in the prompt's document headers
            content: Raw text
            document_type: Picks the chunking strategy
            role: INSTRUCTION documents are always included ahead of reference material
            language: Language tag (defaults to settings.default_language)
            metadata: Extra metadata stored on the document
            on_progress: Optional callback(event, current, total, message)
        """
        document = Document(
            name=name,
            content=content,
            document_type=document_type,
            role=role,
            language=language or self._settings.default_language,
            metadata=metadata or {},
        )
        self.document_store.put(document)
        logger.info("Added document %s (%s)", document.id, name)
        return await self.processor().process(document, on_progress=on_progress)

    def _find_by_source(self, source: str) -> Document | None:
        for document in self.document_store.list_documents():
            if document.metadata.get("source_path") == source:
                return document
        return None

    async def ingest_file(
        self,
        filepath: str,
        *,
        name: str | None = None,
        document_type: DocumentType | None = None,
        role: DocumentRole | None = DocumentRole.REFERENCE,
        language: str | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> ProcessingResult:
        """Ingest a file, skipping it if its content is unchanged.

        This is the recommended way to ingest files. It:
        1. Computes a content hash to detect changes
        2. Skips ingestion if a trained document from the same file is unchanged
        3. Deletes the previous document before re-ingesting a changed file

        Args:
            filepath: Path to a text, markdown or PDF file
            name: Display name (defaults to the file name)
            document_type: Overrides the type suggested by the loader
            role: Document role (reference or instruction)
            language: Language tag (defaults to settings.default_language)
            on_progress: Optional callback for progress updates

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If no loader supports the file type
        """
        file_path = Path(filepath)
        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {filepath}")

        content_hash = hashlib.sha256(file_path.read_bytes()).hexdigest()
        source = str(file_path.resolve())

        existing = self._find_by_source(source)
        if existing is not None:
            if existing.metadata.get("content_hash") == content_hash and existing.is_trained:
                logger.info("Skipping %s: content unchanged", filepath)
                from circuitrag.ingestor import ProcessingResult

                return ProcessingResult(
                    document_id=existing.id, status=existing.status, skipped=True
                )
            self.delete_document(existing.id)

        loaded = self._get_loader_registry().load(filepath)
        return await self.add_document(
            name or loaded.name,
            loaded.content,
            document_type=document_type or loaded.document_type,
            role=role,
            language=language,
            metadata={**loaded.metadata, "content_hash": content_hash},
            on_progress=on_progress,
        )

    async def query(
        self,
        question: str,
        *,
        language: str | None = None,
        verify: bool = True,
        force_extraction: bool = False,
        use_external_search: bool = True,
        limit: int | None = None,
        model: str | None = None,
        user_id: str | None = None,
        widget_id: str | None = None,
    ) -> QueryResponse:
        """Answer a question from the trained corpus.

        Args:
            question: The user's question
            language: Answer language ("pt" or "en")
            verify: Retry negative answers with forced extraction and, if
                    allowed, external search
            force_extraction: Skip straight to the exhaustive fallback
            use_external_search: Allow external lookups during verification
            limit: Maximum number of retrieved chunks
            model: Override the provider's chat model for this query
            user_id: Recorded with usage
            widget_id: Recorded with usage
        """
        orchestrator = self.orchestrator(use_external_search=use_external_search)
        if verify and not force_extraction:
            return await orchestrator.answer_with_verification(
                question,
                language=language,
                user_id=user_id,
                widget_id=widget_id,
                model=model,
                limit=limit,
            )
        return await orchestrator.get_answer(
            question,
            language=language,
            force_extraction=force_extraction,
            user_id=user_id,
            widget_id=widget_id,
            model=model,
            limit=limit,
        )

    def delete_document(self, document_id: str) -> dict[str, Any]:
        """Delete a document with its chunks, vectors and knowledge entries.

        Raises:
            DocumentNotFoundError: If the document does not exist
        """
        if self.document_store.get(document_id) is None:
            raise DocumentNotFoundError(document_id)

        chunks_removed = self.chunk_store.delete_by_document(document_id)
        if self.vector_index is not None:
            self.vector_index.delete_by_document(document_id)
        if self.knowledge_store is not None:
            self.knowledge_store.delete_by_source(document_id)
        self.document_store.delete(document_id)
        logger.info("Deleted document %s (%d chunks)", document_id, chunks_removed)

        return {"deleted": True, "chunks_removed": chunks_removed}

    def close(self) -> None:
        """Release resources held by the vector index.

        Call this when you're done with the instance to release ChromaDB
        file handles. SQLite stores use per-operation connections and don't
        require explicit closing.
        """
        close = getattr(self.vector_index, "close", None)
        if callable(close):
            close()
