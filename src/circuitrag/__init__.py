"""circuitrag - RAG support assistant for circuit-board maintenance.

Answers technicians' questions from uploaded manuals and datasheets, with
hybrid (keyword + embedding) retrieval, an exhaustive fallback over the
whole corpus, provider fallback for generation and optional external
lookups when the documents can't answer.

Quick Start (LiteLLM + Local Storage):
    import asyncio
    from circuitrag import CircuitRAG, LiteLLMProvider, LocalStorage

    rag = CircuitRAG(
        provider=LiteLLMProvider(llm="openai/gpt-4o", embedding="openai/text-embedding-3-small"),
        storage=LocalStorage("./circuitrag_data"),
    )

    asyncio.run(rag.ingest_file("manual-x.pdf"))
    response = asyncio.run(rag.query("Qual a tensão do VS1?"))
    print(response.answer)

Library pieces can also be used on their own:
    from circuitrag.chunker import chunk
    from circuitrag.similarity import cosine_similarity
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("circuitrag")
except PackageNotFoundError:
    __version__ = "unknown"

# Central configuration
from circuitrag.circuitrag import CircuitRAG

# Configuration objects
from circuitrag.configuration import (
    LiteLLMProvider,
    LocalStorage,
    ProviderConfig,
    StorageConfig,
    StoreBundle,
)
from circuitrag.context import ContextAssembler
from circuitrag.embedder import ClientEmbedder, Embedder
from circuitrag.exceptions import (
    CircuitRAGError,
    ConfigurationError,
    DocumentNotFoundError,
    EmbeddingError,
    ExternalSearchError,
    ProviderError,
)
from circuitrag.external import ExternalSearchChain, TopicCache
from circuitrag.generation import AnswerGenerator, GenerationResult

# Pipelines
from circuitrag.ingestor import DocumentProcessor, ProcessingResult

# File loading
from circuitrag.loaders import Loader, LoaderRegistry, PyPDFLoader, TextLoader

# Core models
from circuitrag.models import (
    Chunk,
    Document,
    DocumentRole,
    DocumentStatus,
    DocumentType,
    KnowledgeEntry,
    QueryResponse,
    RetrievalCandidate,
    UsageRecord,
)
from circuitrag.orchestrator import QueryState, RAGOrchestrator

# Provider ABCs
from circuitrag.providers import ChatClient, EmbeddingClient
from circuitrag.retriever import HybridRetriever

# Configuration
from circuitrag.settings import Settings

# Storage ABCs
from circuitrag.stores import (
    ChunkStore,
    DocumentStore,
    KnowledgeStore,
    TopicStore,
    VectorIndex,
)
from circuitrag.usage import UsageLogger

__all__ = [
    # Version
    "__version__",
    # Models
    "Chunk",
    "Document",
    "DocumentRole",
    "DocumentStatus",
    "DocumentType",
    "KnowledgeEntry",
    "QueryResponse",
    "RetrievalCandidate",
    "UsageRecord",
    # Config
    "Settings",
    # Configuration objects
    "ProviderConfig",
    "StorageConfig",
    "StoreBundle",
    "LiteLLMProvider",
    "LocalStorage",
    # Storage ABCs
    "DocumentStore",
    "ChunkStore",
    "KnowledgeStore",
    "TopicStore",
    "VectorIndex",
    "UsageLogger",
    # Embedding
    "Embedder",
    "ClientEmbedder",
    # Provider ABCs
    "ChatClient",
    "EmbeddingClient",
    # Pipelines
    "DocumentProcessor",
    "ProcessingResult",
    "HybridRetriever",
    "ContextAssembler",
    "AnswerGenerator",
    "GenerationResult",
    "ExternalSearchChain",
    "TopicCache",
    "RAGOrchestrator",
    "QueryState",
    # Central configuration
    "CircuitRAG",
    # File loading
    "Loader",
    "LoaderRegistry",
    "TextLoader",
    "PyPDFLoader",
    # Errors
    "CircuitRAGError",
    "ConfigurationError",
    "DocumentNotFoundError",
    "EmbeddingError",
    "ExternalSearchError",
    "ProviderError",
]
