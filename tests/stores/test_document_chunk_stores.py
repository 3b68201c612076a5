# tests/stores/test_document_chunk_stores.py
"""Tests for document and chunk stores (SQLite and in-memory)."""

import os

import pytest

from circuitrag.models import Chunk, Document, DocumentRole, DocumentStatus, DocumentType
from circuitrag.stores import (
    ChunkStore,
    DocumentStore,
    InMemoryChunkStore,
    InMemoryDocumentStore,
    SQLiteChunkStore,
    SQLiteDocumentStore,
)


@pytest.fixture(params=["sqlite", "memory"])
def document_store(request, temp_dir):
    if request.param == "sqlite":
        return SQLiteDocumentStore(os.path.join(temp_dir, "documents.db"))
    return InMemoryDocumentStore()


@pytest.fixture(params=["sqlite", "memory"])
def chunk_store(request, temp_dir):
    if request.param == "sqlite":
        return SQLiteChunkStore(os.path.join(temp_dir, "chunks.db"))
    return InMemoryChunkStore()


def make_chunk(document_id: str, index: int, content: str, language: str = "pt") -> Chunk:
    return Chunk(
        document_id=document_id,
        chunk_index=index,
        content=content,
        language=language,
        embedding=[float(index), 1.0],
        metadata={"strategy": "fixed"},
    )


class TestDocumentStore:
    def test_is_document_store(self, document_store):
        assert isinstance(document_store, DocumentStore)

    def test_put_and_get_roundtrip(self, document_store):
        document = Document(
            name="Manual X",
            content="VS1 (~2.05 V)",
            document_type=DocumentType.MANUAL,
            role=DocumentRole.INSTRUCTION,
            metadata={"source_path": "/tmp/x.md"},
        )
        document_store.put(document)

        loaded = document_store.get(document.id)
        assert loaded is not None
        assert loaded.name == "Manual X"
        assert loaded.document_type == DocumentType.MANUAL
        assert loaded.role == DocumentRole.INSTRUCTION
        assert loaded.metadata == {"source_path": "/tmp/x.md"}

    def test_get_missing(self, document_store):
        assert document_store.get("missing") is None

    def test_role_can_be_absent(self, document_store):
        document = Document(name="Legacy")
        document_store.put(document)
        assert document_store.get(document.id).role is None

    def test_training_documents_only_finished(self, document_store):
        pending = Document(name="pending")
        completed = Document(name="completed", status=DocumentStatus.COMPLETED)
        indexed = Document(name="indexed", status=DocumentStatus.INDEXED)
        failed = Document(name="failed", status=DocumentStatus.ERROR)
        for document in (pending, completed, indexed, failed):
            document_store.put(document)

        names = {d.name for d in document_store.get_training_documents()}
        assert names == {"completed", "indexed"}

    def test_update_status_merges_metadata(self, document_store):
        document = Document(name="doc", metadata={"content_hash": "abc"})
        document_store.put(document)

        updated = document_store.update_status(
            document.id, DocumentStatus.INDEXED, progress=100, metadata={"chunks_count": 3}
        )

        assert updated is not None
        assert updated.status == DocumentStatus.INDEXED
        stored = document_store.get(document.id)
        assert stored.progress == 100
        assert stored.metadata == {"content_hash": "abc", "chunks_count": 3}

    def test_update_status_error_message(self, document_store):
        document = Document(name="doc")
        document_store.put(document)

        document_store.update_status(document.id, DocumentStatus.ERROR, error_message="boom")

        assert document_store.get(document.id).error_message == "boom"

    def test_update_status_missing(self, document_store):
        assert document_store.update_status("missing", DocumentStatus.INDEXED) is None

    def test_delete_and_count(self, document_store):
        first, second = Document(name="a"), Document(name="b")
        document_store.put(first)
        document_store.put(second)
        assert document_store.count_documents() == 2

        document_store.delete(first.id)

        assert document_store.count_documents() == 1
        assert document_store.get(first.id) is None


class TestChunkStore:
    def test_is_chunk_store(self, chunk_store):
        assert isinstance(chunk_store, ChunkStore)

    def test_create_and_get_document_chunks_ordered(self, chunk_store):
        for index in (2, 0, 1):
            chunk_store.create_document_chunk(make_chunk("doc-1", index, f"chunk {index}"))

        chunks = chunk_store.get_document_chunks("doc-1")
        assert [c.chunk_index for c in chunks] == [0, 1, 2]
        assert chunks[0].embedding == [0.0, 1.0]
        assert chunks[0].metadata == {"strategy": "fixed"}

    def test_get_many_preserves_requested_order(self, chunk_store):
        first = chunk_store.create_document_chunk(make_chunk("doc-1", 0, "first"))
        second = chunk_store.create_document_chunk(make_chunk("doc-1", 1, "second"))

        chunks = chunk_store.get_many([second.id, "missing", first.id])
        assert [c.id for c in chunks] == [second.id, first.id]

    def test_chunks_by_language(self, chunk_store):
        chunk_store.create_document_chunk(make_chunk("doc-1", 0, "pt text"))
        chunk_store.create_document_chunk(make_chunk("doc-2", 0, "en text", language="en"))

        assert [c.content for c in chunk_store.get_document_chunks_by_language("en")] == [
            "en text"
        ]

    def test_keyword_search_scores_and_orders(self, chunk_store):
        chunk_store.create_document_chunk(make_chunk("doc-1", 0, "O VS1 fica no canto"))
        chunk_store.create_document_chunk(make_chunk("doc-1", 1, "A tensão do VS1 é 2.05 V"))
        chunk_store.create_document_chunk(make_chunk("doc-1", 2, "Nada relevante"))

        results = chunk_store.search_document_chunks_by_keywords(["tensão", "vs1"], "pt")

        assert [(c.chunk_index, score) for c, score in results] == [(1, 1.0), (0, 0.5)]

    def test_keyword_search_matches_accented_text_case_insensitively(self, chunk_store):
        chunk_store.create_document_chunk(make_chunk("doc-1", 0, "TENSÃO NOMINAL"))

        results = chunk_store.search_document_chunks_by_keywords(["tensão"], "pt")

        assert len(results) == 1

    def test_keyword_search_limit_and_empty(self, chunk_store):
        for index in range(3):
            chunk_store.create_document_chunk(make_chunk("doc-1", index, "vs1"))

        assert len(chunk_store.search_document_chunks_by_keywords(["vs1"], "pt", limit=2)) == 2
        assert chunk_store.search_document_chunks_by_keywords([], "pt") == []

    def test_delete_by_document_returns_count(self, chunk_store):
        chunk_store.create_document_chunk(make_chunk("doc-1", 0, "a"))
        chunk_store.create_document_chunk(make_chunk("doc-1", 1, "b"))
        chunk_store.create_document_chunk(make_chunk("doc-2", 0, "c"))

        assert chunk_store.delete_by_document("doc-1") == 2
        assert chunk_store.count_chunks() == 1
