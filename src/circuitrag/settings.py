"""Behavioral settings for circuitrag.

Settings are passed programmatically - the library does not read from
environment variables. Applications that want env-based config read env
vars at the application layer (see circuitrag.config) and pass values
explicitly.
"""

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, Field, model_validator

# Lighter model used per provider family when the primary provider fails
DEFAULT_FALLBACK_MODELS: dict[str, str] = {
    "openai": "openai/gpt-4o-mini",
    "anthropic": "anthropic/claude-3-7-sonnet-20250219",
}

SUPPORTED_LANGUAGES = ("pt", "en")


class Settings(BaseModel):
    """Behavioral settings for chunking, retrieval and generation.

    Example:
        settings = Settings(max_chunk_size=1000, overlap_size=100)

        # Or tune retrieval only
        settings = Settings(default_limit=10, similarity_threshold=0.5)
    """

    # Chunking
    max_chunk_size: int = 1500
    overlap_size: int = 150
    fixed_threshold: int = 3000  # below this, always fixed-size chunking
    recursive_threshold: int = 10000  # above this, unstructured text goes recursive
    max_recursion_depth: int = 5

    # Embedding
    embedding_input_limit: int = 8000

    # Retrieval
    default_limit: int = 7
    similarity_threshold: float = 0.6
    semantic_share: float = 0.6  # fraction of the limit requested from the semantic branch
    default_keyword_score: float = 0.5

    # Fallback / context assembly
    fallback_score: float = 0.8
    max_document_chars: int = 50000
    max_context_chars: int = 200000

    # Generation
    temperature: float = 0.3
    fallback_temperature: float = 0.3
    max_tokens: int = 1000
    num_retries: int = 3
    fallback_models: dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_FALLBACK_MODELS)
    )

    # Answer verification
    default_language: str = "pt"
    external_search_enabled: bool = True

    @model_validator(mode="after")
    def _check_bounds(self) -> Settings:
        if self.max_chunk_size <= 0:
            raise ValueError("max_chunk_size must be positive")
        if not 0 <= self.overlap_size < self.max_chunk_size:
            raise ValueError(
                f"overlap_size ({self.overlap_size}) must be less than "
                f"max_chunk_size ({self.max_chunk_size})"
            )
        if self.default_language not in SUPPORTED_LANGUAGES:
            raise ValueError(
                f"Unknown language '{self.default_language}'. "
                f"Available languages: {list(SUPPORTED_LANGUAGES)}"
            )
        return self

    def semantic_limit(self, limit: int) -> int:
        """Number of candidates requested from the semantic branch for a given limit."""
        return max(1, math.ceil(round(limit * self.semantic_share, 6)))

    def with_overrides(self, **overrides: Any) -> Settings:
        """Return a copy with the given fields replaced (and re-validated)."""
        data = self.model_dump()
        data.update(overrides)
        return Settings(**data)
