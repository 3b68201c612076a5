# src/circuitrag/models/chunk.py
"""Chunk data model."""

import hashlib
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, Field


def content_hash(text: str) -> str:
    """Digest used to detect duplicate or changed chunk text."""
    return hashlib.md5(text.encode("utf-8")).hexdigest()


class Chunk(BaseModel):
    """A bounded slice of a document's text. The retrieval unit."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    document_id: str
    chunk_index: int
    content: str
    content_hash: str = ""
    source_type: str = "text"
    language: str = "pt"
    embedding: list[float] | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)

    def model_post_init(self, __context: Any) -> None:
        if not self.content_hash:
            self.content_hash = content_hash(self.content)
