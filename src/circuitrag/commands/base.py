# src/circuitrag/commands/base.py
"""Base types for the commands layer.

This module defines the data structures used by all commands:
- Progress callbacks for long-running operations
- Confirmation callbacks for destructive commands
- Result types for each command
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum


class CommandStage(Enum):
    """Stages of command execution for progress reporting."""

    # Ingest stages
    CHUNKING = "Chunking"
    EMBEDDING = "Embedding"
    INDEXING = "Indexing"

    # General stages
    LOADING = "Loading"
    PROCESSING = "Processing"
    COMPLETE = "Complete"


@dataclass
class ProgressUpdate:
    """Progress update for long-running operations.

    Attributes:
        stage: Current stage of the operation
        current: Current item number
        total: Total number of items (0 for indeterminate)
        message: Optional status message
    """

    stage: CommandStage
    current: int
    total: int
    message: str | None = None

    @property
    def is_indeterminate(self) -> bool:
        """True if progress is indeterminate (total unknown)."""
        return self.total == 0

    @property
    def percentage(self) -> int:
        """Progress as percentage (0-100). Returns 0 if indeterminate."""
        if self.total == 0:
            return 0
        return int(100 * self.current / self.total)


# Callback type for progress updates
ProgressCallback = Callable[[ProgressUpdate], None]


@dataclass
class ConfirmRequest:
    """Request for confirmation before a destructive operation."""

    message: str
    details: str | None = None


# Callback type for confirmations - returns True to proceed
ConfirmCallback = Callable[[ConfirmRequest], bool]


@dataclass
class CommandResult:
    """Base result type for commands."""

    success: bool
    error: str | None = None


@dataclass
class FileIngestResult:
    """Result for a single file ingestion."""

    filepath: str
    skipped: bool
    reason: str | None = None  # Reason if skipped or failed
    document_id: str | None = None
    status: str | None = None
    chunks: int = 0
    embedded: int = 0


@dataclass
class IngestResult(CommandResult):
    """Result of the ingest command.

    Attributes:
        files_processed: Number of files successfully processed
        files_skipped: Number of files skipped (unchanged)
        files_failed: Number of files that failed
        total_chunks: Total chunks stored
        total_embedded: Total chunks stored with an embedding
        file_results: Per-file results
        errors: List of (filepath, error_message) for failed files
    """

    files_processed: int = 0
    files_skipped: int = 0
    files_failed: int = 0
    total_chunks: int = 0
    total_embedded: int = 0
    file_results: list[FileIngestResult] = field(default_factory=list)
    errors: list[tuple[str, str]] = field(default_factory=list)


@dataclass
class SourceReference:
    """A document excerpt the answer was built from."""

    document_name: str
    content: str
    score: float
    origin: str
    document_id: str | None = None


@dataclass
class QueryResult(CommandResult):
    """Result of the query command.

    Attributes:
        query: The original question
        answer: Generated answer (always set on success)
        sources: Excerpts included in the prompt, best first
        states: Pipeline states the query went through
        used_fallback: True if the exhaustive document fallback was used
        used_external_search: True if external knowledge was added
    """

    query: str = ""
    answer: str | None = None
    sources: list[SourceReference] = field(default_factory=list)
    states: list[str] = field(default_factory=list)
    used_fallback: bool = False
    used_external_search: bool = False


@dataclass
class DocumentInfo:
    """Information about a stored document."""

    document_id: str
    name: str
    status: str
    document_type: str
    role: str | None
    chunk_count: int = 0


@dataclass
class StatusResult(CommandResult):
    """Result of the status command.

    Attributes:
        total_documents: Number of stored documents
        trained_documents: Documents whose processing finished
        total_chunks: Total chunks in database
        indexed_vectors: Chunks in the vector index
        learned_topics: Technical topics learned from queries
        total_tokens: Tokens recorded by the usage log
        documents: Per-document breakdown (if detailed)
        data_dir: Data directory the statistics were read from
    """

    data_dir: str | None = None
    total_documents: int = 0
    trained_documents: int = 0
    total_chunks: int = 0
    indexed_vectors: int = 0
    learned_topics: int = 0
    total_tokens: int = 0
    documents: list[DocumentInfo] = field(default_factory=list)


@dataclass
class DeleteResult(CommandResult):
    """Result of the delete command.

    Attributes:
        document_id: The document that was deleted
        name: Its display name
        chunks_deleted: Number of chunks deleted
    """

    document_id: str = ""
    name: str = ""
    chunks_deleted: int = 0
