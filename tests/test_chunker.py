# tests/test_chunker.py
"""Tests for the chunking strategies."""

import pytest

from circuitrag.chunker import (
    ChunkingOptions,
    FixedSizeChunker,
    RecursiveChunker,
    SemanticChunker,
    SmartChunker,
    chunk,
    smart_chunking,
    split_sentences,
)
from circuitrag.chunker.base import overlap_tail

SENTENCE = "O regulador alimenta o VS1 com tensão estável. "


def paragraphs(count: int, size: int = 30) -> list[str]:
    return [f"p{i:02d} " + "x" * (size - 4) for i in range(count)]


class TestChunkingOptions:
    def test_defaults(self):
        options = ChunkingOptions.coerce(None)
        assert options.max_chunk_size == 1500
        assert options.overlap_size == 150
        assert options.language == "pt"

    def test_from_dict(self):
        options = ChunkingOptions.coerce(
            {"max_chunk_size": 800, "overlap_size": 80, "language": "en", "document_name": "X"}
        )
        assert options.max_chunk_size == 800
        assert options.overlap_size == 80
        assert options.language == "en"
        assert options.document_name == "X"

    def test_overlap_not_smaller_than_max_is_reduced(self):
        options = ChunkingOptions.coerce({"max_chunk_size": 100, "overlap_size": 200})
        assert options.overlap_size < options.max_chunk_size

    def test_malformed_values_fall_back_to_defaults(self):
        options = ChunkingOptions.coerce({"max_chunk_size": -5, "overlap_size": "a lot"})
        assert options.max_chunk_size == 1500
        assert options.overlap_size == 150

    def test_non_mapping_falls_back_to_defaults(self):
        assert ChunkingOptions.coerce("garbage") == ChunkingOptions()  # type: ignore[arg-type]


class TestOverlapTail:
    def test_keeps_trailing_pieces_within_bound(self):
        assert overlap_tail(["aaaa", "bb", "cc"], overlap_size=6, separator_len=2) == ["bb", "cc"]

    def test_empty_when_last_piece_too_long(self):
        assert overlap_tail(["short", "x" * 50], overlap_size=10, separator_len=2) == []


class TestFixedSizeChunker:
    def test_empty_text(self):
        assert FixedSizeChunker().chunk("", "doc-1") == []
        assert FixedSizeChunker().chunk("   \n\n  ", "doc-1") == []

    def test_small_text_single_chunk(self):
        chunks = FixedSizeChunker().chunk("Hello world.", "doc-1")
        assert len(chunks) == 1
        assert chunks[0].content == "Hello world."
        assert chunks[0].chunk_index == 0
        assert chunks[0].document_id == "doc-1"
        assert chunks[0].metadata["strategy"] == "fixed"

    def test_respects_max_chunk_size(self):
        text = "\n\n".join(paragraphs(40))
        chunks = FixedSizeChunker({"max_chunk_size": 200, "overlap_size": 40}).chunk(text, "d")
        assert len(chunks) > 1
        assert all(len(c.content) <= 200 for c in chunks)

    def test_indices_are_contiguous(self):
        text = "\n\n".join(paragraphs(40))
        chunks = FixedSizeChunker({"max_chunk_size": 200, "overlap_size": 40}).chunk(text, "d")
        assert [c.chunk_index for c in chunks] == list(range(len(chunks)))

    def test_overlap_repeats_trailing_paragraph(self):
        text = "\n\n".join(paragraphs(20))
        chunks = FixedSizeChunker({"max_chunk_size": 200, "overlap_size": 40}).chunk(text, "d")
        last_paragraph = chunks[0].content.split("\n\n")[-1]
        assert chunks[1].content.startswith(last_paragraph)

    def test_no_overlap_when_disabled(self):
        text = "\n\n".join(paragraphs(20))
        chunks = FixedSizeChunker({"max_chunk_size": 200, "overlap_size": 0}).chunk(text, "d")
        joined = "\n\n".join(c.content for c in chunks)
        assert joined == text

    def test_oversize_paragraph_is_force_split(self):
        text = SENTENCE * 100
        chunks = FixedSizeChunker({"max_chunk_size": 500, "overlap_size": 0}).chunk(text, "d")
        assert len(chunks) > 1
        assert all(len(c.content) <= 500 for c in chunks)

    def test_metadata_and_language(self):
        chunker = FixedSizeChunker({"language": "en", "document_name": "Manual X"})
        chunks = chunker.chunk("Some text.", "d", source_type="manual")
        assert chunks[0].language == "en"
        assert chunks[0].source_type == "manual"
        assert chunks[0].metadata["document_name"] == "Manual X"


class TestRecursiveChunker:
    def test_split_sentences(self):
        assert split_sentences("Um. Dois! Três? Quatro") == ["Um.", "Dois!", "Três?", "Quatro"]

    def test_text_that_fits_is_returned_whole(self):
        assert RecursiveChunker().split("short text") == ["short text"]

    def test_sentences_are_packed_within_bound(self):
        pieces = RecursiveChunker({"max_chunk_size": 300, "overlap_size": 0}).split(SENTENCE * 50)
        assert len(pieces) > 1
        assert all(len(p) <= 300 for p in pieces)

    def test_unsplittable_text_stops_at_depth_limit(self):
        text = "x" * 3000
        pieces = RecursiveChunker(
            {"max_chunk_size": 100, "overlap_size": 0, "max_depth": 2}
        ).split(text)
        assert "".join(pieces) == text
        assert len(pieces) == 8
        assert all(len(p) == 375 for p in pieces)


class TestSemanticChunker:
    def test_splits_on_section_headings(self):
        body = "Texto da seção com detalhes técnicos. " * 18
        text = f"# Alimentação\n\n{body}\n\n# Diagnóstico\n\n{body}"
        chunker = SemanticChunker({"max_chunk_size": 1000, "overlap_size": 100})
        chunks = chunker.chunk(text, "d")
        assert len(chunks) == 2
        assert chunks[0].content.startswith("# Alimentação")
        assert chunks[1].content.startswith("# Diagnóstico")

    def test_groups_bullets_with_previous_paragraph(self):
        intro = "Procedimento de verificação da fonte de alimentação principal da placa."
        text = f"{intro}\n\n- medir VS1\n\n- medir VS2"
        pieces = SemanticChunker(document_type="text").split(text)
        assert pieces == [f"{intro}\n\n- medir VS1\n\n- medir VS2"]


class TestSmartChunker:
    def test_short_text_uses_fixed(self):
        assert isinstance(SmartChunker().select("short"), FixedSizeChunker)

    def test_long_manual_uses_semantic(self):
        body = "Texto da seção com detalhes técnicos. " * 50
        text = f"# Um\n\n{body}\n\n# Dois\n\n{body}"
        chunker = SmartChunker(document_type="manual")
        assert isinstance(chunker.select(text), SemanticChunker)

    def test_long_plain_text_uses_recursive(self):
        assert isinstance(SmartChunker().select(SENTENCE * 300), RecursiveChunker)

    def test_medium_plain_text_uses_fixed(self):
        assert isinstance(SmartChunker().select(SENTENCE * 100), FixedSizeChunker)

    def test_smart_chunking_entry_point(self):
        chunks = smart_chunking(SENTENCE * 300, "doc-9", document_type="text")
        assert len(chunks) > 1
        assert all(c.document_id == "doc-9" for c in chunks)
        assert all(len(c.content) <= 1500 for c in chunks)


class TestChunkFunction:
    @pytest.mark.parametrize(
        "hint,strategy",
        [("fixed", "fixed"), ("semantic", "semantic"), ("recursive", "recursive")],
    )
    def test_explicit_strategy(self, hint, strategy):
        chunks = chunk("Some text.", "d", strategy_hint=hint)
        assert chunks[0].metadata["strategy"] == strategy

    def test_document_type_hint_goes_through_smart_dispatch(self):
        chunks = chunk("Some text.", "d", strategy_hint="manual")
        assert chunks[0].metadata["strategy"] == "fixed"

    def test_empty_text(self):
        assert chunk("", "d") == []


def shared_boundary(previous: str, following: str) -> int:
    """Length of the longest suffix of previous that also starts following."""
    for size in range(min(len(previous), len(following)), 0, -1):
        if following.startswith(previous[-size:]):
            return size
    return 0


class TestOverlapBound:
    @pytest.mark.parametrize(
        "chunker_cls,text",
        [
            (FixedSizeChunker, "\n\n".join(paragraphs(40))),
            (
                SemanticChunker,
                "\n\n".join(f"Parágrafo {i:02d} " + "z" * 45 for i in range(40)),
            ),
            (
                RecursiveChunker,
                " ".join(f"Frase {i:03d} sobre o regulador." for i in range(60)),
            ),
        ],
        ids=["fixed", "semantic", "recursive"],
    )
    def test_repeated_text_never_exceeds_overlap_size(self, chunker_cls, text):
        options = ChunkingOptions(max_chunk_size=300, overlap_size=60)
        pieces = chunker_cls(options).split(text)

        assert len(pieces) > 2
        shared = [shared_boundary(a, b) for a, b in zip(pieces, pieces[1:], strict=False)]
        assert all(size <= options.overlap_size for size in shared)
        assert any(size > 0 for size in shared)
