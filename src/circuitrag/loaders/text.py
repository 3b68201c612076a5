# src/circuitrag/loaders/text.py
"""Text and Markdown file loader."""

from pathlib import Path

from circuitrag.loaders.base import LoadedFile, Loader, normalize_text
from circuitrag.models import DocumentType


class TextLoader(Loader):
    """Load plain text and markdown files.

    Markdown files are tagged as manuals so their headings drive semantic
    chunking; plain text stays plain text.
    """

    SUPPORTED_EXTENSIONS = {".txt", ".md", ".markdown", ".text"}
    MARKDOWN_EXTENSIONS = {".md", ".markdown"}

    def supports(self, path: str) -> bool:
        return Path(path).suffix.lower() in self.SUPPORTED_EXTENSIONS

    def load(self, path: str) -> LoadedFile:
        file_path = Path(path)
        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        # Technicians upload exports from all sorts of tools; don't choke on odd bytes
        content = file_path.read_text(encoding="utf-8", errors="replace")
        is_markdown = file_path.suffix.lower() in self.MARKDOWN_EXTENSIONS

        return LoadedFile(
            name=file_path.name,
            content=normalize_text(content),
            document_type=DocumentType.MANUAL if is_markdown else DocumentType.TEXT,
            metadata={
                "source_path": str(file_path.resolve()),
                "type": "markdown" if is_markdown else "text",
            },
        )
