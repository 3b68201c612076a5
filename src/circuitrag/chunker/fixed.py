# src/circuitrag/chunker/fixed.py
"""Fixed-size paragraph chunker."""

from circuitrag.chunker.base import (
    PARAGRAPH_SEPARATOR,
    Chunker,
    ChunkingOptions,
    overlap_tail,
    split_paragraphs,
)
from circuitrag.chunker.recursive import RecursiveChunker


def pack_paragraphs(
    paragraphs: list[str],
    options: ChunkingOptions,
    split_oversize: bool = True,
) -> list[str]:
    """Greedily group paragraphs into pieces of at most max_chunk_size.

    When a piece closes, the next one is seeded with the trailing paragraphs
    of the closed piece whose combined length fits in overlap_size. The seed
    is dropped if it would not leave room for the next paragraph.

    Args:
        paragraphs: Paragraph texts in document order.
        options: Size bounds.
        split_oversize: Force-split paragraphs longer than max_chunk_size with
                        the recursive chunker. If False they become oversize pieces.
    """
    max_size = options.max_chunk_size
    sep_len = len(PARAGRAPH_SEPARATOR)
    pieces: list[str] = []
    current: list[str] = []

    for paragraph in paragraphs:
        paragraph = paragraph.strip()
        if not paragraph:
            continue

        if split_oversize and len(paragraph) > max_size:
            if current:
                pieces.append(PARAGRAPH_SEPARATOR.join(current))
                current = []
            pieces.extend(RecursiveChunker(options).split(paragraph))
            continue

        if current and len(PARAGRAPH_SEPARATOR.join(current)) + sep_len + len(paragraph) > max_size:
            pieces.append(PARAGRAPH_SEPARATOR.join(current))
            current = overlap_tail(current, options.overlap_size, sep_len)
            if current and (
                len(PARAGRAPH_SEPARATOR.join(current)) + sep_len + len(paragraph) > max_size
            ):
                current = []

        current.append(paragraph)

    if current:
        pieces.append(PARAGRAPH_SEPARATOR.join(current))
    return pieces


class FixedSizeChunker(Chunker):
    """Split on blank lines and pack paragraphs up to max_chunk_size.

    Example:
        chunker = FixedSizeChunker({"max_chunk_size": 800, "overlap_size": 80})
        chunks = chunker.chunk(text, document_id="doc-1")
    """

    name = "fixed"

    def __init__(self, options=None, split_oversize: bool = True) -> None:
        super().__init__(options)
        self.split_oversize = split_oversize

    def split(self, text: str) -> list[str]:
        return pack_paragraphs(split_paragraphs(text), self.options, self.split_oversize)
