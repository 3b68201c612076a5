"""LiteLLM provider clients for circuitrag.

This module contains LiteLLM-based client implementations:
- LiteLLMClient: Chat completion using LiteLLM
- LiteLLMEmbeddingClient: Embeddings using LiteLLM
- ChatModels / EmbeddingModels: Curated model constants
- provider_family / resolve_api_key: Credential resolution helpers
"""

from circuitrag.providers.litellm.client import LiteLLMClient, LiteLLMEmbeddingClient
from circuitrag.providers.litellm.models import (
    API_KEY_ENV_VARS,
    ChatModels,
    EmbeddingModels,
    provider_family,
    resolve_api_key,
)

__all__ = [
    # Model constants
    "ChatModels",
    "EmbeddingModels",
    # Helpers
    "API_KEY_ENV_VARS",
    "provider_family",
    "resolve_api_key",
    # Clients
    "LiteLLMClient",
    "LiteLLMEmbeddingClient",
]
