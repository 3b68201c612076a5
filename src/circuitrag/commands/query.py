# src/circuitrag/commands/query.py
"""Query command - answer a question from the training corpus."""

from __future__ import annotations

import asyncio
import os
from pathlib import Path
from typing import TYPE_CHECKING

from circuitrag.commands.base import QueryResult, SourceReference
from circuitrag.config import (
    ConfigError,
    create_circuitrag,
    get_circuitrag_config,
    load_config,
    resolve_data_dir,
)

if TYPE_CHECKING:
    from circuitrag.circuitrag import CircuitRAG


def query(
    question: str,
    data_dir: str | None = None,
    config_path: str | Path | None = None,
    language: str | None = None,
    limit: int | None = None,
    force_extraction: bool = False,
    use_external_search: bool = True,
    verify: bool = True,
) -> QueryResult:
    """Answer a question.

    Args:
        question: The question to ask
        data_dir: Override data directory
        config_path: Override config file path
        language: Answer language ("pt" or "en")
        limit: Maximum number of retrieved chunks (None for default)
        force_extraction: Use every trained document, not just retrieved chunks
        use_external_search: Allow external lookups when the corpus can't answer
        verify: Retry negative answers before giving up

    Returns:
        QueryResult with answer and sources
    """
    config = load_config(config_path)
    if isinstance(config, ConfigError):
        return QueryResult(success=False, query=question, error=config.message)
    effective_data_dir = resolve_data_dir(data_dir, config)

    if not os.path.exists(effective_data_dir):
        return QueryResult(
            success=False,
            query=question,
            error=f"Data directory not found: {effective_data_dir}. Run 'circuitrag ingest' first.",
        )

    rag_config = get_circuitrag_config(data_dir, config_path)
    if isinstance(rag_config, ConfigError):
        return QueryResult(success=False, query=question, error=rag_config.message)

    try:
        rag = create_circuitrag(rag_config)
    except Exception as e:
        return QueryResult(
            success=False, query=question, error=f"Failed to create CircuitRAG: {e}"
        )

    try:
        return query_with_circuitrag(
            rag,
            question,
            language=language,
            limit=limit,
            force_extraction=force_extraction,
            use_external_search=use_external_search,
            verify=verify,
        )
    finally:
        rag.close()


def query_with_circuitrag(
    rag: CircuitRAG,
    question: str,
    language: str | None = None,
    limit: int | None = None,
    force_extraction: bool = False,
    use_external_search: bool = True,
    verify: bool = True,
) -> QueryResult:
    """Answer a question using an existing CircuitRAG instance."""
    if not question.strip():
        return QueryResult(success=False, query=question, error="Question is empty")

    try:
        response = asyncio.run(
            rag.query(
                question,
                language=language,
                verify=verify,
                force_extraction=force_extraction,
                use_external_search=use_external_search,
                limit=limit,
            )
        )
    except Exception as e:
        return QueryResult(success=False, query=question, error=f"Query failed: {e}")

    sources = [
        SourceReference(
            document_name=c.document_name or c.document_id,
            content=c.content,
            score=c.score,
            origin=c.origin,
            document_id=c.document_id,
        )
        for c in response.candidates
    ]

    return QueryResult(
        success=True,
        query=question,
        answer=response.answer,
        sources=sources,
        states=list(response.states),
        used_fallback=response.used_fallback,
        used_external_search=response.used_external_search,
    )
