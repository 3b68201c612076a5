# src/circuitrag/commands/ingest.py
"""Ingest command - add files to the training corpus."""

from __future__ import annotations

import asyncio
import os
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

from circuitrag.commands.base import (
    CommandStage,
    FileIngestResult,
    IngestResult,
    ProgressCallback,
    ProgressUpdate,
)
from circuitrag.config import ConfigError, create_circuitrag, get_circuitrag_config
from circuitrag.models import DocumentRole, DocumentStatus, DocumentType

if TYPE_CHECKING:
    from circuitrag.circuitrag import CircuitRAG


# Map processor event names to CommandStage
STAGE_MAP = {
    "chunking": CommandStage.CHUNKING,
    "embedding": CommandStage.EMBEDDING,
    "indexing": CommandStage.INDEXING,
}


def find_files(path: Path) -> list[str]:
    """Files under path that a default loader can read, in a stable order."""
    from circuitrag.loaders import LoaderRegistry

    if path.is_file():
        return [str(path)]

    registry = LoaderRegistry.default()
    files = []
    for root, dirs, filenames in os.walk(path):
        dirs.sort()
        for filename in sorted(filenames):
            filepath = os.path.join(root, filename)
            if registry.find_loader(filepath):
                files.append(filepath)
    return files


def ingest(
    path: str | Path,
    data_dir: str | None = None,
    config_path: str | Path | None = None,
    document_type: DocumentType | None = None,
    role: DocumentRole = DocumentRole.REFERENCE,
    language: str | None = None,
    on_progress: ProgressCallback | None = None,
    on_file_start: Callable[[str, int, int], None] | None = None,
    on_file_complete: Callable[[FileIngestResult], None] | None = None,
) -> IngestResult:
    """Ingest files or directories into the training corpus.

    Args:
        path: File or directory to ingest
        data_dir: Override data directory (uses config if not provided)
        config_path: Override config file path
        document_type: Force a document type (default: chosen by the loader)
        role: Role for every ingested document
        language: Language tag (default: settings.default_language)
        on_progress: Callback for progress updates during processing
        on_file_start: Callback when starting a file (filepath, file_index, total_files)
        on_file_complete: Callback when a file is done (receives FileIngestResult)

    Returns:
        IngestResult with aggregated statistics and per-file results
    """
    if not Path(path).exists():
        return IngestResult(success=False, error=f"Path not found: {path}")

    config = get_circuitrag_config(data_dir, config_path)
    if isinstance(config, ConfigError):
        return IngestResult(success=False, error=config.message)

    try:
        rag = create_circuitrag(config)
    except Exception as e:
        return IngestResult(success=False, error=f"Failed to create CircuitRAG: {e}")

    try:
        return ingest_with_circuitrag(
            rag,
            path,
            document_type=document_type,
            role=role,
            language=language,
            on_progress=on_progress,
            on_file_start=on_file_start,
            on_file_complete=on_file_complete,
        )
    finally:
        rag.close()


def ingest_with_circuitrag(
    rag: CircuitRAG,
    path: str | Path,
    document_type: DocumentType | None = None,
    role: DocumentRole = DocumentRole.REFERENCE,
    language: str | None = None,
    on_progress: ProgressCallback | None = None,
    on_file_start: Callable[[str, int, int], None] | None = None,
    on_file_complete: Callable[[FileIngestResult], None] | None = None,
) -> IngestResult:
    """Ingest files using an existing CircuitRAG instance."""
    path = Path(path)
    if not path.exists():
        return IngestResult(success=False, error=f"Path not found: {path}")

    files = find_files(path)
    if not files:
        return IngestResult(success=True, error="No supported files found")

    async def run() -> IngestResult:
        result = IngestResult(success=True)
        for i, filepath in enumerate(files):
            if on_file_start:
                on_file_start(filepath, i, len(files))

            file_result = await _ingest_file(
                rag, filepath, document_type, role, language, on_progress
            )
            result.file_results.append(file_result)

            if file_result.skipped:
                result.files_skipped += 1
            elif file_result.status == DocumentStatus.ERROR.value:
                result.errors.append((filepath, file_result.reason or "unknown error"))
            else:
                result.files_processed += 1
                result.total_chunks += file_result.chunks
                result.total_embedded += file_result.embedded

            if on_file_complete:
                on_file_complete(file_result)
        return result

    result = asyncio.run(run())

    if result.errors:
        result.files_failed = len(result.errors)
        if result.files_processed == 0 and result.files_skipped == 0:
            result.success = False
            result.error = result.errors[0][1]

    return result


async def _ingest_file(
    rag: CircuitRAG,
    filepath: str,
    document_type: DocumentType | None,
    role: DocumentRole,
    language: str | None,
    on_progress: ProgressCallback | None = None,
) -> FileIngestResult:
    """Ingest a single file."""

    def progress_adapter(event: str, current: int, total: int, message: str) -> None:
        """Adapt the processor's progress callback to our ProgressUpdate format."""
        if on_progress:
            stage = STAGE_MAP.get(event, CommandStage.PROCESSING)
            on_progress(ProgressUpdate(stage=stage, current=current, total=total, message=message))

    try:
        result = await rag.ingest_file(
            filepath,
            document_type=document_type,
            role=role,
            language=language,
            on_progress=progress_adapter if on_progress else None,
        )
    except (OSError, ValueError) as e:
        return FileIngestResult(
            filepath=filepath,
            skipped=False,
            status=DocumentStatus.ERROR.value,
            reason=f"Error: {type(e).__name__}: {e}",
        )

    if result.skipped:
        return FileIngestResult(
            filepath=filepath,
            skipped=True,
            reason="content unchanged",
            document_id=result.document_id,
            status=result.status.value,
        )

    return FileIngestResult(
        filepath=filepath,
        skipped=False,
        reason=result.error,
        document_id=result.document_id,
        status=result.status.value,
        chunks=result.stored,
        embedded=result.embedded,
    )
