"""Client-based embedder implementation."""

from __future__ import annotations

from typing import TYPE_CHECKING

from circuitrag.embedder.base import Embedder
from circuitrag.exceptions import EmbeddingError
from circuitrag.providers.base import EmbeddingClient

if TYPE_CHECKING:
    from circuitrag.usage import UsageLogger

DEFAULT_INPUT_LIMIT = 8000


class ClientEmbedder(Embedder):
    """Embedder that uses an EmbeddingClient for generating embeddings.

    Input is truncated to the provider's input limit before submission.

    Example:
        from circuitrag.providers.litellm import LiteLLMEmbeddingClient
        from circuitrag.embedder import ClientEmbedder

        client = LiteLLMEmbeddingClient(model="openai/text-embedding-3-small")
        embedder = ClientEmbedder(embedding_client=client)
        vector = embedder.embed("Qual a tensão do VS1?")  # None on failure
    """

    def __init__(
        self,
        embedding_client: EmbeddingClient,
        input_limit: int = DEFAULT_INPUT_LIMIT,
        usage_logger: UsageLogger | None = None,
    ) -> None:
        """Initialize the embedder.

        Args:
            embedding_client: Any EmbeddingClient implementation
            input_limit: Maximum characters sent to the provider per text
            usage_logger: Sink recording one "embedding" record per call
        """
        self._client = embedding_client
        self.input_limit = input_limit
        self.usage_logger = usage_logger
        self.model = getattr(embedding_client, "model", "unknown")

    def _prepare(self, text: str) -> str:
        return text[: self.input_limit]

    def embed_text(self, text: str) -> list[float]:
        """Generate an embedding vector for a single text."""
        result = self._client.embed([self._prepare(text)])
        if not result:
            raise EmbeddingError(f"Provider returned no embedding for model {self.model}")
        return result[0]

    async def aembed_text(self, text: str) -> list[float]:
        """Generate an embedding vector for a single text (async)."""
        result = await self._client.aembed([self._prepare(text)])
        if not result:
            raise EmbeddingError(f"Provider returned no embedding for model {self.model}")
        return result[0]
