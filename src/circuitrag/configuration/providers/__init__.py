# src/circuitrag/configuration/providers/__init__.py
"""Provider configurations for circuitrag."""

from circuitrag.configuration.providers.litellm import LiteLLMProvider

__all__ = ["LiteLLMProvider"]
