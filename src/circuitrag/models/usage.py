"""Provider usage record."""

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field

UsageOperation = Literal["text", "embedding", "search"]


class UsageRecord(BaseModel):
    """One provider invocation, successful or not."""

    model: str
    operation: UsageOperation = "text"
    success: bool
    user_id: str | None = None
    widget_id: str | None = None
    tokens: int = 0
    error_message: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
