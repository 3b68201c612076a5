# src/circuitrag/configuration/storage/__init__.py
"""Storage configurations for circuitrag."""

from circuitrag.configuration.storage.local import LocalStorage

__all__ = ["LocalStorage"]
