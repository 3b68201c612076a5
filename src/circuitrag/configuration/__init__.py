# src/circuitrag/configuration/__init__.py
"""Configuration objects for circuitrag.

Instead of factory methods, you pass configuration objects that know how to
build their components.

Provider configurations (build AI components):
- LiteLLMProvider: Uses LiteLLM for chat, embedding and Perplexity calls

Storage configurations (build data stores):
- LocalStorage: SQLite + Chroma in a local directory

Example:
    from circuitrag import CircuitRAG, LiteLLMProvider, LocalStorage

    rag = CircuitRAG(
        provider=LiteLLMProvider(llm="openai/gpt-4o"),
        storage=LocalStorage("./circuitrag_data"),
    )
"""

from circuitrag.configuration.base import ProviderConfig, StorageConfig, StoreBundle
from circuitrag.configuration.providers import LiteLLMProvider
from circuitrag.configuration.storage import LocalStorage

__all__ = [
    "ProviderConfig",
    "StorageConfig",
    "StoreBundle",
    "LiteLLMProvider",
    "LocalStorage",
]
