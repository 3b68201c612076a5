# src/circuitrag/loaders/registry.py
"""Loader registry for auto-selecting file loaders."""

from circuitrag.loaders.base import LoadedFile, Loader
from circuitrag.loaders.pypdf_loader import PyPDFLoader
from circuitrag.loaders.text import TextLoader


class LoaderRegistry:
    """Registry for file loaders.

    Automatically selects the appropriate loader based on file extension.
    """

    def __init__(self) -> None:
        self._loaders: list[Loader] = []

    def register(self, loader: Loader) -> None:
        self._loaders.append(loader)

    def find_loader(self, path: str) -> Loader | None:
        """Find a loader that supports the given path."""
        for loader in self._loaders:
            if loader.supports(path):
                return loader
        return None

    def load(self, path: str) -> LoadedFile:
        """Load a file using the appropriate loader.

        Raises:
            ValueError: If no loader supports the file type
        """
        loader = self.find_loader(path)
        if loader is None:
            raise ValueError(f"No loader found for: {path}")
        return loader.load(path)

    @classmethod
    def default(cls) -> "LoaderRegistry":
        """Create a registry with the text and PDF loaders registered."""
        registry = cls()
        registry.register(TextLoader())
        registry.register(PyPDFLoader())
        return registry
