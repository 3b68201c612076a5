# src/circuitrag/loaders/pypdf_loader.py
"""PDF loader using pypdf - lightweight, pure Python."""

import logging
from pathlib import Path

from pypdf import PdfReader

from circuitrag.loaders.base import LoadedFile, Loader, normalize_text
from circuitrag.models import DocumentType

logger = logging.getLogger(__name__)


class PyPDFLoader(Loader):
    """Load PDF files using pypdf.

    Pages are joined with blank lines so page boundaries become paragraph
    boundaries for the chunker. Scanned pages without a text layer yield
    nothing and are counted in the metadata.
    """

    SUPPORTED_EXTENSIONS = {".pdf"}

    def supports(self, path: str) -> bool:
        return Path(path).suffix.lower() in self.SUPPORTED_EXTENSIONS

    def load(self, path: str) -> LoadedFile:
        file_path = Path(path)
        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        reader = PdfReader(path)
        pages = []
        empty_pages = 0
        for page in reader.pages:
            text = (page.extract_text() or "").strip()
            if text:
                pages.append(text)
            else:
                empty_pages += 1

        if empty_pages:
            logger.info("%s: %d page(s) without extractable text", file_path.name, empty_pages)

        return LoadedFile(
            name=file_path.name,
            content=normalize_text("\n\n".join(pages)),
            document_type=DocumentType.TECHNICAL,
            metadata={
                "source_path": str(file_path.resolve()),
                "type": "pdf",
                "pages": len(reader.pages),
                "empty_pages": empty_pages,
            },
        )
