"""Provider implementations for circuitrag.

This module contains chat-completion and embedding provider abstractions:
- ChatClient: Abstract base class for chat-completion providers
- EmbeddingClient: Abstract base class for embedding providers
- Completion: Generated text plus token usage
- FallbackChain: Ordered first-success-wins adapter chain
- LiteLLM implementations

Usage:
    from circuitrag.providers import ChatClient, EmbeddingClient
    from circuitrag.providers.litellm import LiteLLMClient, ChatModels
"""

from circuitrag.providers.base import ChatClient, Completion, EmbeddingClient
from circuitrag.providers.fallback import Attempt, FallbackChain, FallbackExhausted
from circuitrag.providers.litellm import (
    ChatModels,
    EmbeddingModels,
    LiteLLMClient,
    LiteLLMEmbeddingClient,
    provider_family,
    resolve_api_key,
)

__all__ = [
    # ABCs
    "ChatClient",
    "Completion",
    "EmbeddingClient",
    # Fallback
    "Attempt",
    "FallbackChain",
    "FallbackExhausted",
    # Model constants
    "ChatModels",
    "EmbeddingModels",
    "provider_family",
    "resolve_api_key",
    # LiteLLM clients
    "LiteLLMClient",
    "LiteLLMEmbeddingClient",
]
