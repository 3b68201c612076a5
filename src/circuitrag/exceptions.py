# src/circuitrag/exceptions.py
"""Exceptions raised inside the RAG pipeline.

Public entry points translate these into sentinel values or localized
messages; they only escape from lower-level adapters.
"""


class CircuitRAGError(Exception):
    """Base class for all circuitrag errors."""


class ConfigurationError(CircuitRAGError):
    """Raised when required configuration (model, credential) is missing."""


class EmbeddingError(CircuitRAGError):
    """Raised when the embedding provider fails or returns no vector."""


class ProviderError(CircuitRAGError):
    """Raised when a chat-completion provider call fails.

    Attributes:
        model: Model identifier the call was made against.
    """

    def __init__(self, message: str, model: str) -> None:
        super().__init__(message)
        self.model = model


class ExternalSearchError(CircuitRAGError):
    """Raised by an external knowledge source that could not answer."""


class DocumentNotFoundError(CircuitRAGError):
    """Raised when a document id does not exist in the document store."""

    def __init__(self, document_id: str) -> None:
        super().__init__(f"Document not found: {document_id}")
        self.document_id = document_id
