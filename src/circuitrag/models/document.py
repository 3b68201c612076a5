# src/circuitrag/models/document.py
"""Document data model."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, Field


class DocumentStatus(str, Enum):
    """Processing status of a document."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    INDEXED = "indexed"
    ERROR = "error"


class DocumentType(str, Enum):
    """Kind of training artifact a document came from."""

    TEXT = "text"
    FILE = "file"
    WEBSITE = "website"
    MANUAL = "manual"
    TECHNICAL = "technical"


class DocumentRole(str, Enum):
    """How a document is used when building the prompt.

    Instruction documents are rendered ahead of ordinary reference material.
    """

    REFERENCE = "reference"
    INSTRUCTION = "instruction"


TRAINED_STATUSES = frozenset({DocumentStatus.COMPLETED, DocumentStatus.INDEXED})


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Document(BaseModel):
    """An uploaded or pasted training artifact."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str
    content: str = ""
    document_type: DocumentType = DocumentType.TEXT
    status: DocumentStatus = DocumentStatus.PENDING
    progress: int | None = None
    role: DocumentRole | None = None
    language: str = "pt"
    error_message: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)

    @property
    def is_trained(self) -> bool:
        """True once the processing pipeline has finished with this document."""
        return self.status in TRAINED_STATUSES
