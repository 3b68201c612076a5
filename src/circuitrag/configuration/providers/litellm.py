# src/circuitrag/configuration/providers/litellm.py
"""LiteLLM provider configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from circuitrag.embedder import Embedder
    from circuitrag.external import KnowledgeSource
    from circuitrag.generation import AnswerGenerator
    from circuitrag.settings import Settings
    from circuitrag.usage import UsageLogger


@dataclass(frozen=True)
class LiteLLMProvider:
    """Provider configuration using LiteLLM for chat, embedding and Perplexity calls.

    LiteLLM provides a unified interface to OpenAI, Anthropic, Perplexity and
    many more providers. Credentials not given here are read by LiteLLM from
    the provider's usual environment variable (OPENAI_API_KEY, ...).

    Args:
        llm: LiteLLM model identifier for answer generation.
             Examples: "openai/gpt-4o", "anthropic/claude-3-7-sonnet-20250219"
        embedding: LiteLLM model identifier for embeddings.
        llm_api_key: Explicit credential for the llm model.
        embedding_api_key: Explicit credential for the embedding model.
        perplexity_model: Online model used for external lookups.
        searx_instances: Public Searx instances, tried in order. None uses
                         the built-in list; an empty tuple disables Searx.

    Example:
        provider = LiteLLMProvider(
            llm="anthropic/claude-3-7-sonnet-20250219",
            embedding="openai/text-embedding-3-small",
        )
    """

    llm: str = "openai/gpt-4o"
    embedding: str = "openai/text-embedding-3-small"
    llm_api_key: str | None = None
    embedding_api_key: str | None = None
    perplexity_model: str = "perplexity/llama-3.1-sonar-small-128k-online"
    searx_instances: tuple[str, ...] | None = None

    def build_embedder(
        self, settings: Settings, usage_logger: UsageLogger | None = None
    ) -> Embedder:
        """Build a ClientEmbedder using the LiteLLM embedding client.

        Args:
            settings: Settings containing num_retries and the input limit.
            usage_logger: Where every embedding call is recorded.
        """
        from circuitrag.embedder import ClientEmbedder
        from circuitrag.providers.litellm import LiteLLMEmbeddingClient

        embedding_client = LiteLLMEmbeddingClient(
            model=self.embedding,
            api_key=self.embedding_api_key,
            num_retries=settings.num_retries,
        )
        return ClientEmbedder(
            embedding_client=embedding_client,
            input_limit=settings.embedding_input_limit,
            usage_logger=usage_logger,
        )

    def build_generator(
        self, settings: Settings, usage_logger: UsageLogger | None = None
    ) -> AnswerGenerator:
        from circuitrag.generation import AnswerGenerator

        return AnswerGenerator(
            model=self.llm,
            api_key=self.llm_api_key,
            settings=settings,
            usage_logger=usage_logger,
        )

    def build_knowledge_sources(self) -> list[KnowledgeSource]:
        """Perplexity first, then Searx, then the DuckDuckGo Instant Answer API."""
        from circuitrag.external import DuckDuckGoSource, PerplexitySource, SearxSource

        sources: list[KnowledgeSource] = [PerplexitySource(model=self.perplexity_model)]
        if self.searx_instances is None:
            sources.append(SearxSource())
        elif self.searx_instances:
            sources.append(SearxSource(instances=self.searx_instances))
        sources.append(DuckDuckGoSource())
        return sources
