"""Ingestion pipeline for circuitrag."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from circuitrag.chunker import ChunkingOptions, smart_chunking
from circuitrag.embedder import Embedder
from circuitrag.models import Chunk, Document, DocumentStatus, KnowledgeEntry
from circuitrag.settings import Settings
from circuitrag.stores import ChunkStore, DocumentStore, KnowledgeStore, VectorIndex

logger = logging.getLogger(__name__)

KNOWLEDGE_SUMMARY_CHARS = 1000
EMPTY_DOCUMENT_MESSAGE = "Documento sem conteúdo"

ProgressCallback = Callable[[str, int, int, str], None]
"""Callback for ingestion progress updates.

Args:
    event: Event type - "chunking", "embedding" or "indexing"
    current: Current progress count (0 to total)
    total: Total items to process
    message: Human-readable status message

Example:
    def on_progress(event: str, current: int, total: int, message: str) -> None:
        print(f"[{event}] {current}/{total}: {message}")
"""


@dataclass
class ProcessingResult:
    """Outcome of processing one document.

    Attributes:
        document_id: The processed document
        status: Final document status (indexed, completed or error)
        chunks: Number of chunks produced by the chunker
        stored: Number of chunks persisted
        embedded: Number of stored chunks that carry an embedding
        error: Error message when status is error
        skipped: True when an unchanged file was not processed again
    """

    document_id: str
    status: DocumentStatus
    chunks: int = 0
    stored: int = 0
    embedded: int = 0
    error: str | None = None
    skipped: bool = False

    @property
    def success(self) -> bool:
        return self.status != DocumentStatus.ERROR


def knowledge_summary(text: str) -> str:
    if len(text) > KNOWLEDGE_SUMMARY_CHARS:
        return text[:KNOWLEDGE_SUMMARY_CHARS] + "..."
    return text


class DocumentProcessor:
    """Turns a stored document into searchable chunks.

    Pipeline:
    1. Mark the document as processing
    2. Chunk it (strategy picked from the document type)
    3. Embed and persist each chunk, one at a time
    4. Add embedded chunks to the vector index (optional)
    5. Record a knowledge entry and the final status

    A chunk whose embedding or persistence fails is logged and skipped; the
    rest of the document is still processed. Without an embedder (or when
    every embedding fails) chunks are stored without vectors and the
    document ends up completed rather than indexed, so only keyword search
    can find it.
    """

    def __init__(
        self,
        document_store: DocumentStore,
        chunk_store: ChunkStore,
        embedder: Embedder | None = None,
        knowledge_store: KnowledgeStore | None = None,
        vector_index: VectorIndex | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the processor.

        Args:
            document_store: Store holding the documents and their status
            chunk_store: Destination for chunks
            embedder: Embeds chunk text. None stores chunks without vectors.
            knowledge_store: Receives one summary entry per processed document
            vector_index: Optional vector index fed with embedded chunks
            settings: Chunk sizes and strategy thresholds
        """
        self.document_store = document_store
        self.chunk_store = chunk_store
        self.embedder = embedder
        self.knowledge_store = knowledge_store
        self.vector_index = vector_index
        self.settings = settings or Settings()

    def _options(self, document: Document) -> ChunkingOptions:
        return ChunkingOptions(
            max_chunk_size=self.settings.max_chunk_size,
            overlap_size=self.settings.overlap_size,
            language=document.language,
            document_name=document.name,
            max_depth=self.settings.max_recursion_depth,
        )

    async def process(
        self,
        document: Document,
        on_progress: ProgressCallback | None = None,
    ) -> ProcessingResult:
        """Chunk, embed and index a document.

        Never raises: unexpected errors move the document to the error
        status and are reported in the result.
        """

        def progress(event: str, current: int, total: int, message: str = "") -> None:
            if on_progress:
                on_progress(event, current, total, message)

        try:
            self.document_store.update_status(
                document.id, DocumentStatus.PROCESSING, progress=0
            )

            if not document.content or not document.content.strip():
                logger.warning("Document %s has no content", document.id)
                return self._fail(document, EMPTY_DOCUMENT_MESSAGE)

            progress("chunking", 0, 1, f"Chunking {document.name}...")
            chunks = smart_chunking(
                document.content,
                document.id,
                source_type=document.document_type.value,
                document_type=document.document_type.value,
                options=self._options(document),
                fixed_threshold=self.settings.fixed_threshold,
                recursive_threshold=self.settings.recursive_threshold,
            )
            progress("chunking", 1, 1, f"Split into {len(chunks)} chunks")
            logger.info("Document %s split into %d chunks", document.id, len(chunks))

            stored = await self._embed_and_store(chunks, progress)
            embedded = [c for c in stored if c.embedding]

            if embedded and self.vector_index is not None:
                progress("indexing", 0, 1, f"Indexing {len(embedded)} chunks...")
                try:
                    self.vector_index.add(embedded)
                except Exception as e:
                    logger.error("Vector index update failed for %s: %s", document.id, e)
                progress("indexing", 1, 1, "Indexing complete")

            self._record_knowledge(document)

            if embedded:
                status = DocumentStatus.INDEXED
                metadata = {
                    "chunks_count": len(stored),
                    "embedded_count": len(embedded),
                    "embedding_model": getattr(self.embedder, "model", "unknown"),
                }
            else:
                status = DocumentStatus.COMPLETED
                metadata = {"chunks_count": len(stored), "embedded_count": 0}

            self.document_store.update_status(
                document.id, status, progress=100, metadata=metadata
            )
            logger.info(
                "Document %s %s: %d/%d chunks stored, %d embedded",
                document.id,
                status.value,
                len(stored),
                len(chunks),
                len(embedded),
            )
            return ProcessingResult(
                document_id=document.id,
                status=status,
                chunks=len(chunks),
                stored=len(stored),
                embedded=len(embedded),
            )
        except Exception as e:
            logger.exception("Processing failed for document %s", document.id)
            return self._fail(document, str(e))

    async def _embed_and_store(
        self, chunks: list[Chunk], progress: Callable[[str, int, int, str], None]
    ) -> list[Chunk]:
        stored: list[Chunk] = []
        total = len(chunks)
        progress("embedding", 0, total, "Embedding chunks...")
        for i, chunk in enumerate(chunks):
            try:
                if self.embedder is not None:
                    chunk.embedding = await self.embedder.aembed(chunk.content)
                stored.append(self.chunk_store.create_document_chunk(chunk))
            except Exception as e:
                logger.error(
                    "Failed to store chunk %d of %s: %s", chunk.chunk_index, chunk.document_id, e
                )
                continue
            progress("embedding", i + 1, total, f"Processed {i + 1}/{total} chunks")
        return stored

    def _record_knowledge(self, document: Document) -> None:
        if self.knowledge_store is None:
            return
        try:
            self.knowledge_store.create_knowledge_entry(
                KnowledgeEntry(
                    content=knowledge_summary(document.content),
                    source_type=document.document_type.value,
                    source_id=document.id,
                    language=document.language,
                )
            )
        except Exception as e:
            logger.warning("Could not create knowledge entry for %s: %s", document.id, e)

    def _fail(self, document: Document, message: str) -> ProcessingResult:
        try:
            self.document_store.update_status(
                document.id, DocumentStatus.ERROR, error_message=message
            )
        except Exception as e:
            logger.error("Could not mark document %s as failed: %s", document.id, e)
        return ProcessingResult(
            document_id=document.id, status=DocumentStatus.ERROR, error=message
        )
