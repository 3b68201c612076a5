# src/circuitrag/chunker/base.py
"""Chunker abstract base class and shared helpers."""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from circuitrag.models import Chunk

logger = logging.getLogger(__name__)

DEFAULT_MAX_CHUNK_SIZE = 1500
DEFAULT_OVERLAP_SIZE = 150
DEFAULT_MAX_DEPTH = 5

PARAGRAPH_BREAK = re.compile(r"\n\s*\n")
PARAGRAPH_SEPARATOR = "\n\n"


@dataclass(frozen=True)
class ChunkingOptions:
    """Size bounds and tags applied to every chunk of one document.

    Attributes:
        max_chunk_size: Upper bound on chunk length in characters.
        overlap_size: Upper bound on text repeated at a chunk boundary.
                      Always strictly smaller than max_chunk_size.
        language: Language tag copied onto each chunk.
        document_name: Display name recorded in chunk metadata.
        max_depth: Recursion limit for the recursive strategy.
    """

    max_chunk_size: int = DEFAULT_MAX_CHUNK_SIZE
    overlap_size: int = DEFAULT_OVERLAP_SIZE
    language: str = "pt"
    document_name: str | None = None
    max_depth: int = DEFAULT_MAX_DEPTH

    @classmethod
    def coerce(cls, options: ChunkingOptions | dict[str, Any] | None) -> ChunkingOptions:
        """Build options from whatever the caller passed.

        None, non-mapping values and individually invalid fields fall back to
        the documented defaults instead of raising.
        """
        if isinstance(options, ChunkingOptions):
            return options
        if not isinstance(options, dict):
            if options is not None:
                logger.warning("Ignoring malformed chunking options: %r", options)
            return cls()

        max_size = _positive_int(options.get("max_chunk_size"), DEFAULT_MAX_CHUNK_SIZE)
        overlap = _non_negative_int(options.get("overlap_size"), DEFAULT_OVERLAP_SIZE)
        if overlap >= max_size:
            overlap = min(DEFAULT_OVERLAP_SIZE, max_size // 10)
            logger.warning("overlap_size must be smaller than max_chunk_size; using %d", overlap)

        language = options.get("language")
        name = options.get("document_name")
        return cls(
            max_chunk_size=max_size,
            overlap_size=overlap,
            language=language if isinstance(language, str) and language else "pt",
            document_name=name if isinstance(name, str) and name else None,
            max_depth=_non_negative_int(options.get("max_depth"), DEFAULT_MAX_DEPTH),
        )


def _positive_int(value: Any, default: int) -> int:
    if isinstance(value, int) and not isinstance(value, bool) and value > 0:
        return value
    return default


def _non_negative_int(value: Any, default: int) -> int:
    if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
        return value
    return default


def split_paragraphs(text: str) -> list[str]:
    """Split on blank lines, dropping empty paragraphs."""
    return [p.strip() for p in PARAGRAPH_BREAK.split(text) if p.strip()]


def overlap_tail(pieces: list[str], overlap_size: int, separator_len: int) -> list[str]:
    """Trailing pieces whose combined length (with separators) fits in overlap_size.

    Walks backward from the end and stops at the first piece that would push
    the total over the bound, so the result may be empty.
    """
    tail: list[str] = []
    total = 0
    for piece in reversed(pieces):
        added = len(piece) + (separator_len if tail else 0)
        if total + added > overlap_size:
            break
        total += added
        tail.insert(0, piece)
    return tail


class Chunker(ABC):
    """Abstract base class for chunking strategies.

    Subclasses implement split(), which turns text into bounded pieces.
    chunk() wraps the pieces into Chunk models with contiguous indices.
    """

    name: str = "base"

    def __init__(self, options: ChunkingOptions | dict[str, Any] | None = None) -> None:
        self.options = ChunkingOptions.coerce(options)

    @abstractmethod
    def split(self, text: str) -> list[str]:
        """Split text into ordered, size-bounded pieces."""
        ...

    def chunk(self, text: str, document_id: str, source_type: str = "text") -> list[Chunk]:
        """Split text and wrap each non-empty piece in a Chunk.

        Empty or whitespace-only text yields an empty list.
        """
        if not text or not text.strip():
            return []

        pieces = [p.strip() for p in self.split(text)]
        metadata: dict[str, Any] = {"strategy": self.name}
        if self.options.document_name:
            metadata["document_name"] = self.options.document_name

        return [
            Chunk(
                document_id=document_id,
                chunk_index=index,
                content=piece,
                source_type=source_type,
                language=self.options.language,
                metadata=dict(metadata),
            )
            for index, piece in enumerate(p for p in pieces if p)
        ]
