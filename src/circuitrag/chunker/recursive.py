# src/circuitrag/chunker/recursive.py
"""Depth-bounded recursive chunker."""

import re

from circuitrag.chunker.base import (
    PARAGRAPH_SEPARATOR,
    Chunker,
    overlap_tail,
    split_paragraphs,
)

SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?])\s+")

# How far from the midpoint to look for whitespace when bisecting
BISECT_WINDOW = 100


def split_sentences(text: str) -> list[str]:
    """Split on whitespace following sentence-ending punctuation."""
    return [s.strip() for s in SENTENCE_BOUNDARY.split(text) if s.strip()]


class RecursiveChunker(Chunker):
    """Divide-and-conquer chunker.

    Text that fits is emitted as is. Otherwise it is split by paragraph,
    then by sentence, and as a last resort bisected at the whitespace
    nearest to the midpoint. Recursion stops after max_depth levels, so
    only unsplittable text at the depth limit can exceed max_chunk_size.
    """

    name = "recursive"

    def split(self, text: str) -> list[str]:
        pieces: list[str] = []
        self._split(text.strip(), 0, pieces)
        return pieces

    def _split(self, text: str, depth: int, out: list[str]) -> None:
        max_size = self.options.max_chunk_size
        if len(text) <= max_size or depth > self.options.max_depth:
            if text:
                out.append(text)
            return

        paragraphs = split_paragraphs(text)
        if len(paragraphs) > 1:
            self._pack_paragraphs(paragraphs, depth, out)
            return

        sentences = split_sentences(text)
        if len(sentences) > 1:
            self._pack_sentences(sentences, depth, out)
            return

        self._bisect(text, depth, out)

    def _pack_paragraphs(self, paragraphs: list[str], depth: int, out: list[str]) -> None:
        max_size = self.options.max_chunk_size
        current = ""
        for paragraph in paragraphs:
            if len(paragraph) > max_size:
                if current:
                    out.append(current)
                    current = ""
                self._split(paragraph, depth + 1, out)
                continue
            if current and len(current) + len(paragraph) + 2 > max_size:
                out.append(current)
                current = ""
            current = f"{current}{PARAGRAPH_SEPARATOR}{paragraph}" if current else paragraph
        if current:
            out.append(current)

    def _pack_sentences(self, sentences: list[str], depth: int, out: list[str]) -> None:
        max_size = self.options.max_chunk_size
        group: list[str] = []
        for sentence in sentences:
            if len(sentence) > max_size:
                if group:
                    out.append(" ".join(group))
                    group = []
                self._split(sentence, depth + 1, out)
                continue
            if group and len(" ".join(group)) + 1 + len(sentence) > max_size:
                out.append(" ".join(group))
                group = overlap_tail(group, self.options.overlap_size, 1)
                if group and len(" ".join(group)) + 1 + len(sentence) > max_size:
                    group = []
            group.append(sentence)
        if group:
            out.append(" ".join(group))

    def _bisect(self, text: str, depth: int, out: list[str]) -> None:
        midpoint = len(text) // 2
        split_at = midpoint
        for offset in range(BISECT_WINDOW):
            if midpoint + offset < len(text) and text[midpoint + offset].isspace():
                split_at = midpoint + offset
                break
            if midpoint - offset >= 0 and text[midpoint - offset].isspace():
                split_at = midpoint - offset
                break

        for half in (text[:split_at].strip(), text[split_at:].strip()):
            if half:
                self._split(half, depth + 1, out)
