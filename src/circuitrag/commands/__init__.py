# src/circuitrag/commands/__init__.py
"""UI-agnostic command layer for circuitrag.

Commands return data structures, allowing the CLI (or any other UI) to
render results appropriately.

Usage:
    from circuitrag.commands import ingest, query, status

    # Ingest files
    result = ingest.ingest("./manuals", on_progress=my_callback)

    # Ask a question
    result = query.query("Qual a tensão do VS1?")

    # Get database status
    result = status.status()
"""

from circuitrag.commands import delete, ingest, query, status
from circuitrag.commands.base import (
    CommandResult,
    CommandStage,
    ConfirmCallback,
    ConfirmRequest,
    DeleteResult,
    DocumentInfo,
    FileIngestResult,
    IngestResult,
    ProgressCallback,
    ProgressUpdate,
    QueryResult,
    SourceReference,
    StatusResult,
)

__all__ = [
    # Base types
    "CommandStage",
    "ProgressUpdate",
    "ProgressCallback",
    "ConfirmRequest",
    "ConfirmCallback",
    "CommandResult",
    # Result types
    "IngestResult",
    "FileIngestResult",
    "QueryResult",
    "SourceReference",
    "StatusResult",
    "DocumentInfo",
    "DeleteResult",
    # Command modules
    "ingest",
    "query",
    "status",
    "delete",
]
