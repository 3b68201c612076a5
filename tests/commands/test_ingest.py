# tests/commands/test_ingest.py
"""Tests for the ingest command."""

from pathlib import Path

import pytest

from circuitrag.commands import CommandStage
from circuitrag.commands.ingest import find_files, ingest, ingest_with_circuitrag
from circuitrag.models import DocumentRole


@pytest.fixture
def manuals(tmp_path) -> Path:
    root = tmp_path / "manuals"
    (root / "sub").mkdir(parents=True)
    (root / "a.txt").write_text("A tensão do VS1 é 2.05 V.", encoding="utf-8")
    (root / "b.md").write_text("# Solda\n\nUse fluxo.", encoding="utf-8")
    (root / "c.docx").write_bytes(b"PK")
    (root / "sub" / "d.txt").write_text("Firmware 1.2 corrige o boot.", encoding="utf-8")
    return root


class TestFindFiles:
    def test_walks_directory_in_order(self, manuals):
        files = [Path(f).relative_to(manuals).as_posix() for f in find_files(manuals)]

        assert files == ["a.txt", "b.md", "sub/d.txt"]

    def test_single_file(self, manuals):
        assert find_files(manuals / "c.docx") == [str(manuals / "c.docx")]


class TestIngestWithCircuitRAG:
    def test_ingests_directory(self, rag, manuals):
        started: list[tuple[int, int]] = []
        completed: list[str] = []
        stages: set[CommandStage] = set()

        result = ingest_with_circuitrag(
            rag,
            manuals,
            on_progress=lambda update: stages.add(update.stage),
            on_file_start=lambda path, i, total: started.append((i, total)),
            on_file_complete=lambda file_result: completed.append(file_result.status),
        )

        assert result.success
        assert result.files_processed == 3
        assert result.files_failed == 0
        assert result.total_chunks == 3
        assert result.total_embedded == 3
        assert started == [(0, 3), (1, 3), (2, 3)]
        assert completed == ["indexed", "indexed", "indexed"]
        assert {CommandStage.CHUNKING, CommandStage.EMBEDDING} <= stages

    def test_second_run_skips_unchanged(self, rag, manuals):
        ingest_with_circuitrag(rag, manuals)

        result = ingest_with_circuitrag(rag, manuals)

        assert result.files_skipped == 3
        assert result.files_processed == 0
        assert all(r.reason == "content unchanged" for r in result.file_results)

    def test_role_is_applied(self, rag, manuals):
        ingest_with_circuitrag(rag, manuals / "a.txt", role=DocumentRole.INSTRUCTION)

        (document,) = rag.document_store.list_documents()
        assert document.role == DocumentRole.INSTRUCTION

    def test_failed_files_are_reported(self, rag, manuals):
        (manuals / "empty.txt").write_text("  ", encoding="utf-8")

        result = ingest_with_circuitrag(rag, manuals)

        assert result.success
        assert result.files_processed == 3
        assert result.files_failed == 1
        assert result.errors[0][1] == "Documento sem conteúdo"

    def test_all_failed(self, rag, tmp_path):
        path = tmp_path / "empty.txt"
        path.write_text("", encoding="utf-8")

        result = ingest_with_circuitrag(rag, path)

        assert not result.success
        assert result.error == "Documento sem conteúdo"

    def test_unsupported_single_file(self, rag, manuals):
        result = ingest_with_circuitrag(rag, manuals / "c.docx")

        assert not result.success
        assert result.error.startswith("Error: ValueError")

    def test_no_supported_files(self, rag, tmp_path):
        result = ingest_with_circuitrag(rag, tmp_path)

        assert result.success
        assert result.error == "No supported files found"

    def test_missing_path(self, rag, tmp_path):
        result = ingest_with_circuitrag(rag, tmp_path / "missing")

        assert not result.success
        assert result.error.startswith("Path not found")


class TestIngest:
    def test_missing_path(self, tmp_path):
        result = ingest(tmp_path / "missing", data_dir=str(tmp_path / "data"))

        assert not result.success
        assert result.error.startswith("Path not found")
