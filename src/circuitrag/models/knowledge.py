"""Knowledge base entry model."""

from datetime import datetime, timezone
from uuid import uuid4

from pydantic import BaseModel, Field


class KnowledgeEntry(BaseModel):
    """Summary record written once a document has been processed."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    content: str
    source_type: str = "document"
    source_id: str | None = None
    language: str = "pt"
    verified: bool = True
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
