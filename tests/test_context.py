# tests/test_context.py
"""Tests for context assembly."""

from circuitrag.context import (
    PRIORITY_HEADER,
    REFERENCE_HEADER,
    ContextAssembler,
    is_priority_document,
)
from circuitrag.models import Document, DocumentRole, RetrievalCandidate
from circuitrag.prompts import NO_RELEVANT_DOCUMENTS


def candidate(name: str, content: str, score: float = 0.9, priority: bool = False):
    return RetrievalCandidate(
        id=f"{name}-0",
        document_id=name,
        document_name=name,
        content=content,
        score=score,
        is_priority=priority,
    )


class TestIsPriorityDocument:
    def test_instruction_role(self):
        assert is_priority_document(Document(name="Manual", role=DocumentRole.INSTRUCTION))

    def test_reference_role_beats_name(self):
        document = Document(name="Instruções gerais", role=DocumentRole.REFERENCE)
        assert not is_priority_document(document)

    def test_name_heuristic_without_role(self):
        assert is_priority_document(Document(name="Instruções de atendimento"))
        assert is_priority_document(Document(name="REGRAS do suporte"))
        assert not is_priority_document(Document(name="Manual X"))


class TestFormatForPrompt:
    def test_no_candidates(self):
        assert ContextAssembler().format_for_prompt([]) == NO_RELEVANT_DOCUMENTS

    def test_block_layout(self):
        text = ContextAssembler().format_for_prompt([candidate("Manual X", "VS1 (~2.05 V)")])

        assert 'DOCUMENTO 1: "Manual X" (Relevância: 0.90)' in text
        assert text.endswith("VS1 (~2.05 V)")
        assert PRIORITY_HEADER not in text
        assert REFERENCE_HEADER not in text

    def test_unnamed_document(self):
        unnamed = RetrievalCandidate(id="c", document_id="d", content="texto", score=0.0)

        text = ContextAssembler().format_for_prompt([unnamed])

        assert 'DOCUMENTO 1: "Documento sem nome 1"' in text
        assert "Relevância" not in text

    def test_priority_section_first(self):
        text = ContextAssembler().format_for_prompt(
            [
                candidate("Manual X", "referência", score=0.95),
                candidate("Regras", "instrução", score=0.5, priority=True),
            ]
        )

        assert text.index(PRIORITY_HEADER) < text.index(REFERENCE_HEADER)
        assert text.index('"Regras"') < text.index('"Manual X"')
        assert 'DOCUMENTO 1: "Regras"' in text
        assert 'DOCUMENTO 2: "Manual X"' in text

    def test_long_document_is_truncated_with_marker(self):
        assembler = ContextAssembler(max_document_chars=10)

        text = assembler.format_for_prompt([candidate("Manual X", "x" * 50)])

        assert "x" * 10 + "\n[...Conteúdo truncado, excede 10 caracteres]" in text
        assert "x" * 11 not in text

    def test_total_budget_drops_remaining_candidates(self):
        assembler = ContextAssembler(max_context_chars=300)

        text = assembler.format_for_prompt(
            [candidate("a", "a" * 200), candidate("b", "b" * 200), candidate("c", "c" * 200)]
        )

        assert 'DOCUMENTO 1: "a"' in text
        assert "DOCUMENTO 2" not in text
        assert len(text) <= 300

    def test_block_crossing_budget_is_cut_with_marker(self):
        assembler = ContextAssembler(max_context_chars=200)

        text = assembler.format_for_prompt([candidate("a", "a" * 500)])

        assert text.endswith("limite total de contexto de 200 caracteres]")
        assert len(text) <= 200


class TestBuildContext:
    def test_answer_prompt_contains_query_and_documents(self):
        prompt = ContextAssembler().build_context(
            "Qual a tensão do VS1?", [candidate("Manual X", "VS1 (~2.05 V)")]
        )

        assert '"Qual a tensão do VS1?"' in prompt
        assert "VS1 (~2.05 V)" in prompt
        assert "DOCUMENTOS TÉCNICOS DISPONÍVEIS" in prompt

    def test_english_prompt(self):
        prompt = ContextAssembler().build_context(
            "What is VS1?", [candidate("Manual X", "VS1 (~2.05 V)")], language="en"
        )

        assert "AVAILABLE TECHNICAL DOCUMENTS" in prompt

    def test_forced_extraction_prompt(self):
        prompt = ContextAssembler().build_context(
            "VS1?", [candidate("Manual X", "VS1 (~2.05 V)")], force_extraction=True
        )

        assert "Analise cuidadosamente" in prompt

    def test_no_candidates_prompt(self):
        prompt = ContextAssembler().build_context("VS1?", [])

        assert "não há documentos técnicos disponíveis" in prompt
