# src/circuitrag/context.py
"""Context assembly: turn ranked candidates into the prompt's document block."""

from __future__ import annotations

import logging

from circuitrag.models import Document, DocumentRole, RetrievalCandidate
from circuitrag.prompts import NO_RELEVANT_DOCUMENTS, build_answer_prompt

logger = logging.getLogger(__name__)

DEFAULT_MAX_DOCUMENT_CHARS = 50000
DEFAULT_MAX_CONTEXT_CHARS = 200000

PRIORITY_NAME_MARKERS = ("instruç", "instruc", "priorit", "regras")

BLOCK_RULE = "------------------------"
PRIORITY_HEADER = "INSTRUÇÕES PRIORITÁRIAS:"
REFERENCE_HEADER = "DOCUMENTOS TÉCNICOS:"


def name_looks_like_instructions(name: str | None) -> bool:
    """Legacy name heuristic for instruction documents."""
    lowered = (name or "").lower()
    return any(marker in lowered for marker in PRIORITY_NAME_MARKERS)


def is_priority_document(document: Document) -> bool:
    """Whether a document is rendered ahead of ordinary reference material.

    The explicit role wins. Documents ingested without a role fall back to
    a guess from the name, and each guess is logged.
    """
    if document.role is not None:
        return document.role == DocumentRole.INSTRUCTION
    if name_looks_like_instructions(document.name):
        logger.debug(
            "Treating '%s' as an instruction document based on its name", document.name
        )
        return True
    return False


def truncation_marker(limit: int) -> str:
    return f"\n[...Conteúdo truncado, excede {limit} caracteres]"


def budget_marker(limit: int) -> str:
    return f"\n[...Conteúdo truncado, limite total de contexto de {limit} caracteres]"


class ContextAssembler:
    """Formats retrieval candidates into a bounded, delimited text block.

    Args:
        max_document_chars: Per-candidate content limit; longer content is cut
            and gets an explicit truncation marker.
        max_context_chars: Budget for the whole block. Candidates are added in
            order (priority section first); the one that crosses the budget
            is cut with a marker and the rest are dropped.
    """

    def __init__(
        self,
        max_document_chars: int = DEFAULT_MAX_DOCUMENT_CHARS,
        max_context_chars: int = DEFAULT_MAX_CONTEXT_CHARS,
    ) -> None:
        self.max_document_chars = max_document_chars
        self.max_context_chars = max_context_chars

    def format_for_prompt(self, candidates: list[RetrievalCandidate]) -> str:
        if not candidates:
            return NO_RELEVANT_DOCUMENTS

        priority = [c for c in candidates if c.is_priority]
        reference = [c for c in candidates if not c.is_priority]

        parts: list[str] = []
        used = 0
        ordinal = 0
        for header, section in ((PRIORITY_HEADER, priority), (REFERENCE_HEADER, reference)):
            if not section:
                continue
            if priority:
                # Section headers only appear when there is something to separate
                parts.append(f"\n\n{header}")
                used += len(header) + 2
            for candidate in section:
                ordinal += 1
                block = self._format_block(ordinal, candidate, self.max_context_chars - used)
                if block is None:
                    logger.warning(
                        "Context budget of %d chars reached; dropping %d remaining candidate(s)",
                        self.max_context_chars,
                        len(candidates) - ordinal + 1,
                    )
                    return "".join(parts)
                parts.append(block)
                used += len(block)

        return "".join(parts)

    def build_context(
        self,
        query: str,
        candidates: list[RetrievalCandidate],
        language: str = "pt",
        force_extraction: bool = False,
    ) -> str:
        """Full system prompt for answering a query from the given candidates."""
        if not candidates:
            logger.warning("Building an answer prompt without any documents")
            return build_answer_prompt(query, None, language, force_extraction)
        return build_answer_prompt(
            query, self.format_for_prompt(candidates), language, force_extraction
        )

    def _format_block(
        self, ordinal: int, candidate: RetrievalCandidate, budget: int
    ) -> str | None:
        """Render one candidate, or None if not even a truncated block fits the budget."""
        name = candidate.document_name or f"Documento sem nome {ordinal}"
        header = f'DOCUMENTO {ordinal}: "{name}"'
        if candidate.score:
            header += f" (Relevância: {candidate.score:.2f})"

        head = f"\n\n{BLOCK_RULE}\n{header}\n{BLOCK_RULE}\n\n"

        content = candidate.content
        if len(content) > self.max_document_chars:
            content = content[: self.max_document_chars] + truncation_marker(
                self.max_document_chars
            )

        if len(head) + len(content) > budget:
            marker = budget_marker(self.max_context_chars)
            room = budget - len(head) - len(marker)
            if room <= 0:
                return None
            content = candidate.content[:room] + marker

        logger.debug("Adding '%s' to the context (%d chars)", name, len(content))
        return head + content
