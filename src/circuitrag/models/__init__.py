"""Data models for circuitrag."""

from circuitrag.models.chunk import Chunk, content_hash
from circuitrag.models.document import (
    TRAINED_STATUSES,
    Document,
    DocumentRole,
    DocumentStatus,
    DocumentType,
)
from circuitrag.models.knowledge import KnowledgeEntry
from circuitrag.models.results import QueryResponse, RetrievalCandidate
from circuitrag.models.usage import UsageRecord

__all__ = [
    "Chunk",
    "content_hash",
    "Document",
    "DocumentRole",
    "DocumentStatus",
    "DocumentType",
    "TRAINED_STATUSES",
    "KnowledgeEntry",
    "QueryResponse",
    "RetrievalCandidate",
    "UsageRecord",
]
