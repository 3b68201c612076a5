# src/circuitrag/loaders/base.py
"""Loader abstract base class and text normalization."""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from circuitrag.models import DocumentType

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0e-\x1f\x7f]")
_EXCESS_NEWLINES = re.compile(r"\n{3,}")


def normalize_text(text: str) -> str:
    """Clean extracted text before chunking.

    Form feeds become newlines, CRLF/CR become LF, runs of three or more
    newlines collapse to a blank line and other control characters are removed.

    >>> normalize_text("Page 1\\fPage 2\\r\\n\\n\\n\\nEnd\\x00")
    'Page 1\\nPage 2\\n\\nEnd'
    """
    text = text.replace("\f", "\n").replace("\r\n", "\n").replace("\r", "\n")
    text = _CONTROL_CHARS.sub("", text)
    text = _EXCESS_NEWLINES.sub("\n\n", text)
    return text.strip()


@dataclass
class LoadedFile:
    """Text extracted from a file, ready to become a Document.

    Attributes:
        name: Display name (the file name)
        content: Normalized text
        document_type: Tag used to pick a chunking strategy
        metadata: Loader details such as the page count or source path
    """

    name: str
    content: str
    document_type: DocumentType = DocumentType.FILE
    metadata: dict[str, Any] = field(default_factory=dict)


class Loader(ABC):
    """Abstract base class for file loading."""

    @abstractmethod
    def load(self, path: str) -> LoadedFile:
        """Load a file and return its normalized text.

        Raises:
            FileNotFoundError: If the file does not exist
        """
        ...

    @abstractmethod
    def supports(self, path: str) -> bool:
        """Check if this loader supports the given path."""
        ...
