"""File loaders for circuitrag."""

from circuitrag.loaders.base import LoadedFile, Loader, normalize_text
from circuitrag.loaders.pypdf_loader import PyPDFLoader
from circuitrag.loaders.registry import LoaderRegistry
from circuitrag.loaders.text import TextLoader

__all__ = [
    "Loader",
    "LoadedFile",
    "LoaderRegistry",
    "TextLoader",
    "PyPDFLoader",
    "normalize_text",
]
