# src/circuitrag/commands/delete.py
"""Delete command - remove a document from the corpus.

Uses a callback for interactive confirmation, allowing each UI to
implement its own confirmation method.
"""

from __future__ import annotations

import os
from pathlib import Path

from circuitrag.commands.base import ConfirmCallback, ConfirmRequest, DeleteResult
from circuitrag.config import ConfigError, get_stores, load_config, resolve_data_dir
from circuitrag.configuration import StoreBundle


def delete(
    document_id: str,
    data_dir: str | None = None,
    config_path: str | Path | None = None,
    on_confirm: ConfirmCallback | None = None,
) -> DeleteResult:
    """Delete a document with its chunks, vectors and knowledge entries.

    Args:
        document_id: ID of the document to delete
        data_dir: Override data directory
        config_path: Override config file path
        on_confirm: Optional callback for confirmation. Return True to
            proceed, False to cancel. If None, deletion proceeds without
            confirmation (equivalent to --force).

    Returns:
        DeleteResult with deletion statistics, or cancelled result
    """
    config = load_config(config_path)
    if isinstance(config, ConfigError):
        return DeleteResult(success=False, document_id=document_id, error=config.message)
    effective_data_dir = resolve_data_dir(data_dir, config)

    if not os.path.exists(effective_data_dir):
        return DeleteResult(success=False, document_id=document_id, error="No database found.")

    try:
        stores = get_stores(effective_data_dir)
    except Exception as e:
        return DeleteResult(
            success=False, document_id=document_id, error=f"Failed to access database: {e}"
        )

    try:
        return delete_from_stores(stores, document_id, on_confirm)
    finally:
        stores.close()


def delete_from_stores(
    stores: StoreBundle,
    document_id: str,
    on_confirm: ConfirmCallback | None = None,
) -> DeleteResult:
    """Delete a document using already-open stores."""
    document = stores.documents.get(document_id)
    if document is None:
        return DeleteResult(
            success=False, document_id=document_id, error=f"Document not found: {document_id}"
        )

    chunks_to_delete = len(stores.chunks.get_document_chunks(document_id))

    if on_confirm is not None:
        confirm_request = ConfirmRequest(
            message=f"Delete '{document.name}'?",
            details=f"This will remove {chunks_to_delete} chunks from the database.",
        )
        if not on_confirm(confirm_request):
            return DeleteResult(
                success=False, document_id=document_id, name=document.name, error="Cancelled."
            )

    # Delete in order: vectors -> chunks -> knowledge entries -> document
    if stores.vector_index is not None:
        stores.vector_index.delete_by_document(document_id)
    deleted = stores.chunks.delete_by_document(document_id)
    stores.knowledge.delete_by_source(document_id)
    stores.documents.delete(document_id)

    return DeleteResult(
        success=True,
        document_id=document_id,
        name=document.name,
        chunks_deleted=deleted,
    )
