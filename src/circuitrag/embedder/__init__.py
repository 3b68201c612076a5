"""Embedding functionality for circuitrag."""

from circuitrag.embedder.base import Embedder
from circuitrag.embedder.client import ClientEmbedder

__all__ = ["Embedder", "ClientEmbedder"]
