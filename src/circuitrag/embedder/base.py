"""Embedder abstract base class."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from circuitrag.models import UsageRecord

if TYPE_CHECKING:
    from circuitrag.usage import UsageLogger

logger = logging.getLogger(__name__)


class Embedder(ABC):
    """Abstract base class for embedding generation.

    Subclasses implement embed_text, which may raise. embed() and aembed()
    are the boundary used by the pipeline: they never raise and return None
    on any failure so callers can degrade to keyword-only retrieval. When a
    usage_logger is set, every call through that boundary is recorded.
    """

    model: str = "unknown"
    usage_logger: UsageLogger | None = None

    @abstractmethod
    def embed_text(self, text: str) -> list[float]:
        """Generate an embedding vector for a single text."""
        ...

    async def aembed_text(self, text: str) -> list[float]:
        """Generate an embedding vector (async). Defaults to the sync call."""
        return self.embed_text(text)

    def embed(self, text: str) -> list[float] | None:
        """Embed text, returning None instead of raising."""
        try:
            vector = self.embed_text(text) or None
        except Exception as e:
            return self._failed(e)
        return self._succeeded(vector)

    async def aembed(self, text: str) -> list[float] | None:
        """Embed text (async), returning None instead of raising."""
        try:
            vector = await self.aembed_text(text) or None
        except Exception as e:
            return self._failed(e)
        return self._succeeded(vector)

    def _failed(self, error: Exception) -> None:
        logger.warning("Embedding failed with %s: %s", self.model, error)
        self._record(False, str(error))
        return None

    def _succeeded(self, vector: list[float] | None) -> list[float] | None:
        if vector is None:
            self._record(False, "Provider returned an empty embedding")
        else:
            self._record(True)
        return vector

    def _record(self, success: bool, error_message: str | None = None) -> None:
        if self.usage_logger is None:
            return
        self.usage_logger.log(
            UsageRecord(
                model=self.model,
                operation="embedding",
                success=success,
                error_message=error_message,
            )
        )
