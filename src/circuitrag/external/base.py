"""Abstract base class for external knowledge sources."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class ExternalResult:
    """Formatted text returned by an external source.

    Attributes:
        text: Plain-text summary ready to splice into a prompt.
        source: Name recorded in the usage log (e.g. "external-search-searx").
        tokens: Token usage reported by the source, or an estimate.
    """

    text: str
    source: str
    tokens: int = 0


def estimate_tokens(query: str, text: str) -> int:
    """Rough token count for sources that don't report usage."""
    return len(query) // 4 + len(text) // 4


class KnowledgeSource(ABC):
    """A web or API lookup that can answer technical questions.

    search() returns None when the source has nothing useful and raises
    ExternalSearchError when it could not be reached. ExternalSearchChain
    handles both.
    """

    name: str = "unknown"

    @property
    def available(self) -> bool:
        """False when the source lacks the configuration it needs."""
        return True

    @abstractmethod
    async def search(self, query: str, language: str = "pt") -> ExternalResult | None:
        """Look up a query and return formatted findings."""
        ...
