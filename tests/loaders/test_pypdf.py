# tests/loaders/test_pypdf.py
"""Tests for PyPDFLoader."""

from unittest.mock import MagicMock, patch

import pytest

from circuitrag.loaders import PyPDFLoader
from circuitrag.models import DocumentType


def fake_reader(*page_texts):
    reader = MagicMock()
    pages = []
    for text in page_texts:
        page = MagicMock()
        page.extract_text.return_value = text
        pages.append(page)
    reader.pages = pages
    return reader


@pytest.fixture
def pdf_path(tmp_path):
    path = tmp_path / "esquema.pdf"
    path.write_bytes(b"%PDF-1.4 placeholder")
    return path


class TestPyPDFLoader:
    def test_supports(self):
        loader = PyPDFLoader()
        assert loader.supports("board.PDF")
        assert not loader.supports("board.txt")

    def test_pages_become_paragraphs(self, pdf_path):
        reader = fake_reader("Página 1\n", None, "  ", "Página 4\fcontinua")
        with patch("circuitrag.loaders.pypdf_loader.PdfReader", return_value=reader) as cls:
            loaded = PyPDFLoader().load(str(pdf_path))

        cls.assert_called_once_with(str(pdf_path))
        assert loaded.name == "esquema.pdf"
        assert loaded.content == "Página 1\n\nPágina 4\ncontinua"
        assert loaded.document_type == DocumentType.TECHNICAL
        assert loaded.metadata["pages"] == 4
        assert loaded.metadata["empty_pages"] == 2
        assert loaded.metadata["type"] == "pdf"

    def test_scanned_pdf_has_no_content(self, pdf_path):
        with patch("circuitrag.loaders.pypdf_loader.PdfReader", return_value=fake_reader("")):
            loaded = PyPDFLoader().load(str(pdf_path))

        assert loaded.content == ""

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            PyPDFLoader().load(str(tmp_path / "missing.pdf"))
