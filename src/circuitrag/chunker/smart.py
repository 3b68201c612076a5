# src/circuitrag/chunker/smart.py
"""Adaptive strategy selection."""

from __future__ import annotations

import logging
from typing import Any

from circuitrag.chunker.base import Chunker, ChunkingOptions
from circuitrag.chunker.fixed import FixedSizeChunker
from circuitrag.chunker.recursive import RecursiveChunker
from circuitrag.chunker.semantic import STRUCTURED_TYPES, SemanticChunker
from circuitrag.models import Chunk

logger = logging.getLogger(__name__)

DEFAULT_FIXED_THRESHOLD = 3000
DEFAULT_RECURSIVE_THRESHOLD = 10000

STRATEGIES = ("fixed", "semantic", "recursive", "smart")


class SmartChunker(Chunker):
    """Pick a strategy per document from its size and type.

    - Under fixed_threshold characters: fixed-size.
    - Manual/technical documents: semantic, or recursive when semantic
      collapses to a single chunk for text longer than max_chunk_size.
    - Anything else over recursive_threshold: recursive.
    - Everything else: fixed-size.
    """

    name = "smart"

    def __init__(
        self,
        options: ChunkingOptions | dict[str, Any] | None = None,
        document_type: str = "text",
        fixed_threshold: int = DEFAULT_FIXED_THRESHOLD,
        recursive_threshold: int = DEFAULT_RECURSIVE_THRESHOLD,
    ) -> None:
        super().__init__(options)
        self.document_type = document_type
        self.fixed_threshold = fixed_threshold
        self.recursive_threshold = recursive_threshold

    def select(self, text: str) -> Chunker:
        """Return the chunker that smart dispatch would use for this text."""
        if len(text) < self.fixed_threshold:
            return FixedSizeChunker(self.options)

        if self.document_type in STRUCTURED_TYPES:
            semantic = SemanticChunker(self.options, document_type=self.document_type)
            if len(semantic.split(text)) <= 1 and len(text) > self.options.max_chunk_size:
                logger.debug("Semantic chunking collapsed to one chunk; using recursive")
                return RecursiveChunker(self.options)
            return semantic

        if len(text) > self.recursive_threshold:
            return RecursiveChunker(self.options)

        return FixedSizeChunker(self.options)

    def split(self, text: str) -> list[str]:
        return self.select(text).split(text)

    def chunk(self, text: str, document_id: str, source_type: str = "text") -> list[Chunk]:
        if not text or not text.strip():
            return []
        return self.select(text).chunk(text, document_id, source_type)


def smart_chunking(
    text: str,
    document_id: str,
    source_type: str = "text",
    document_type: str = "text",
    options: ChunkingOptions | dict[str, Any] | None = None,
    fixed_threshold: int = DEFAULT_FIXED_THRESHOLD,
    recursive_threshold: int = DEFAULT_RECURSIVE_THRESHOLD,
) -> list[Chunk]:
    """Chunk a document with adaptive strategy selection."""
    return SmartChunker(
        options,
        document_type=document_type,
        fixed_threshold=fixed_threshold,
        recursive_threshold=recursive_threshold,
    ).chunk(text, document_id, source_type)


def chunk(
    text: str,
    document_id: str,
    source_type: str = "text",
    strategy_hint: str | None = None,
    options: ChunkingOptions | dict[str, Any] | None = None,
) -> list[Chunk]:
    """Split document text into ordered chunks.

    Args:
        text: Raw document text. Empty or whitespace-only text yields [].
        document_id: Owning document identifier.
        source_type: Source tag copied onto each chunk.
        strategy_hint: A strategy name ("fixed", "semantic", "recursive",
                       "smart") or a document type ("manual", "technical",
                       "text", ...). Document types go through smart dispatch.
        options: ChunkingOptions, a dict of option fields, or None. Malformed
                 values fall back to defaults.

    Returns:
        Chunks with chunk_index 0..n-1.
    """
    hint = (strategy_hint or "smart").lower()
    chunker: Chunker
    if hint == "fixed":
        chunker = FixedSizeChunker(options)
    elif hint == "semantic":
        chunker = SemanticChunker(options)
    elif hint == "recursive":
        chunker = RecursiveChunker(options)
    elif hint == "smart":
        chunker = SmartChunker(options)
    else:
        chunker = SmartChunker(options, document_type=hint)
    return chunker.chunk(text, document_id, source_type)
