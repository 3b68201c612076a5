# src/circuitrag/providers/litellm/models.py
"""Model constants and provider-family helpers for LiteLLM.

You can always pass any valid LiteLLM model string directly; the constants
only cover the models the assistant is tuned for.
"""

from __future__ import annotations

import os
from typing import Literal

ProviderFamily = Literal["openai", "anthropic", "perplexity", "local"]

# Environment variable holding the credential for each provider family
API_KEY_ENV_VARS: dict[str, str] = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "perplexity": "PERPLEXITY_API_KEY",
}

LOCAL_MODEL_MARKERS = ("ollama", "llama.cpp", "llamacpp", "local/", "gguf", "ggml")


class ChatModels:
    """Chat models used for answer generation."""

    GPT_4O = "openai/gpt-4o"
    GPT_4O_MINI = "openai/gpt-4o-mini"
    CLAUDE_37_SONNET = "anthropic/claude-3-7-sonnet-20250219"
    SONAR_SMALL_ONLINE = "perplexity/llama-3.1-sonar-small-128k-online"


class EmbeddingModels:
    """Embedding models for LiteLLMEmbeddingClient."""

    TEXT_3_SMALL = "openai/text-embedding-3-small"
    TEXT_3_LARGE = "openai/text-embedding-3-large"


def provider_family(model: str) -> ProviderFamily:
    """Infer the provider family from a model identifier.

    Examples:
        >>> provider_family("anthropic/claude-3-7-sonnet-20250219")
        'anthropic'
        >>> provider_family("claude-3-haiku")
        'anthropic'
        >>> provider_family("gpt-4o")
        'openai'
    """
    lowered = model.lower()
    if any(marker in lowered for marker in LOCAL_MODEL_MARKERS):
        return "local"
    prefix, _, name = lowered.rpartition("/")
    if prefix == "anthropic" or name.startswith("claude"):
        return "anthropic"
    if prefix == "perplexity":
        return "perplexity"
    return "openai"


def resolve_api_key(model: str, explicit: str | None = None) -> str | None:
    """Resolve the credential for a model.

    The explicitly configured key wins; otherwise the provider family's
    environment variable is used. Local models need no key and resolve to
    an empty string.
    """
    if explicit:
        return explicit
    family = provider_family(model)
    if family == "local":
        return ""
    return os.environ.get(API_KEY_ENV_VARS[family]) or None
