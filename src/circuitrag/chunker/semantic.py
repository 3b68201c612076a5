# src/circuitrag/chunker/semantic.py
"""Structure-aware chunker for manuals and technical documents."""

import re

from circuitrag.chunker.base import PARAGRAPH_SEPARATOR, Chunker, split_paragraphs
from circuitrag.chunker.fixed import pack_paragraphs

STRUCTURED_TYPES = frozenset({"manual", "technical"})

# A line that opens a section: markdown heading, numbered heading, a
# chapter/section marker, or an ALL-CAPS label followed by a colon.
SECTION_START = re.compile(
    r"^(?="
    r"(?i:#{1,3}|capítulo|seção|parte|módulo|\d+\.)[ \t]+\S"
    r"|[A-ZÀ-Ý][A-ZÀ-Ý0-9 ]{2,}:"
    r")",
    re.MULTILINE,
)

# Paragraphs that read as the continuation of the previous one
CONTINUATION = re.compile(r"^(?:•|-|\*|[a-zà-ÿ]|\d+\.)")
SHORT_PARAGRAPH = 50


def split_sections(text: str) -> list[str]:
    """Split text in front of every section heading."""
    return [s.strip() for s in SECTION_START.split(text) if s.strip()]


def group_paragraphs(paragraphs: list[str]) -> list[str]:
    """Merge bullets, lowercase continuations and short lines into the previous paragraph."""
    groups: list[str] = []
    for paragraph in paragraphs:
        is_continuation = bool(CONTINUATION.match(paragraph)) or len(paragraph) < SHORT_PARAGRAPH
        if is_continuation and groups:
            groups[-1] = f"{groups[-1]}{PARAGRAPH_SEPARATOR}{paragraph}"
        else:
            groups.append(paragraph)
    return groups


class SemanticChunker(Chunker):
    """Keep related text together.

    For structured document types, splits on section headings when at least
    two sections are found. Otherwise groups continuation paragraphs. Either
    way the resulting units are packed with the fixed-size rules, with
    oversize units force-split recursively.
    """

    name = "semantic"

    def __init__(self, options=None, document_type: str = "manual") -> None:
        super().__init__(options)
        self.document_type = document_type

    def split(self, text: str) -> list[str]:
        if self.document_type in STRUCTURED_TYPES:
            sections = split_sections(text)
            if len(sections) > 1:
                return pack_paragraphs(sections, self.options)

        return pack_paragraphs(group_paragraphs(split_paragraphs(text)), self.options)
