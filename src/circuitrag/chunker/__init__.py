"""Chunking strategies for circuitrag.

This module exports:
- Chunker: Abstract base class for chunking strategies
- FixedSizeChunker: Paragraph packing with boundary overlap
- SemanticChunker: Section/continuation-aware grouping
- RecursiveChunker: Paragraph -> sentence -> bisect divide-and-conquer
- SmartChunker: Adaptive selection by document size and type
- chunk / smart_chunking: Functional entry points

Example:
    from circuitrag.chunker import chunk

    chunks = chunk(text, document_id="doc-1", strategy_hint="manual")
"""

from circuitrag.chunker.base import Chunker, ChunkingOptions
from circuitrag.chunker.fixed import FixedSizeChunker, pack_paragraphs
from circuitrag.chunker.recursive import RecursiveChunker, split_sentences
from circuitrag.chunker.semantic import SemanticChunker
from circuitrag.chunker.smart import STRATEGIES, SmartChunker, chunk, smart_chunking

__all__ = [
    "Chunker",
    "ChunkingOptions",
    "FixedSizeChunker",
    "RecursiveChunker",
    "SemanticChunker",
    "SmartChunker",
    "STRATEGIES",
    "chunk",
    "pack_paragraphs",
    "smart_chunking",
    "split_sentences",
]
