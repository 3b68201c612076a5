# src/circuitrag/commands/status.py
"""Status command - show corpus statistics."""

from __future__ import annotations

import os
from pathlib import Path

from circuitrag.commands.base import DocumentInfo, StatusResult
from circuitrag.config import ConfigError, get_stores, load_config, resolve_data_dir
from circuitrag.configuration import StoreBundle


def status(
    data_dir: str | None = None,
    config_path: str | Path | None = None,
    detailed: bool = False,
) -> StatusResult:
    """Get corpus statistics.

    Args:
        data_dir: Override data directory
        config_path: Override config file path
        detailed: If True, include per-document breakdown

    Returns:
        StatusResult with database statistics
    """
    config = load_config(config_path)
    if isinstance(config, ConfigError):
        return StatusResult(success=False, error=config.message)
    effective_data_dir = resolve_data_dir(data_dir, config)

    if not os.path.exists(effective_data_dir):
        return StatusResult(success=True, data_dir=effective_data_dir)

    try:
        stores = get_stores(effective_data_dir)
    except Exception as e:
        return StatusResult(success=False, error=f"Failed to access database: {e}")

    try:
        result = status_from_stores(stores, detailed=detailed)
    finally:
        stores.close()
    result.data_dir = effective_data_dir
    return result


def status_from_stores(stores: StoreBundle, detailed: bool = False) -> StatusResult:
    """Collect statistics from already-open stores."""
    documents = stores.documents.list_documents()
    usage_total = getattr(stores.usage_logger, "total_tokens", None)

    result = StatusResult(
        success=True,
        total_documents=len(documents),
        trained_documents=sum(1 for d in documents if d.is_trained),
        total_chunks=stores.chunks.count_chunks(),
        indexed_vectors=stores.vector_index.count() if stores.vector_index else 0,
        learned_topics=len(stores.topics.get_additional_topics()),
        total_tokens=usage_total() if callable(usage_total) else 0,
    )

    if detailed:
        for document in documents:
            result.documents.append(
                DocumentInfo(
                    document_id=document.id,
                    name=document.name,
                    status=document.status.value,
                    document_type=document.document_type.value,
                    role=document.role.value if document.role else None,
                    chunk_count=len(stores.chunks.get_document_chunks(document.id)),
                )
            )

    return result
