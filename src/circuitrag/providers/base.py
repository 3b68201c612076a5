"""Abstract base classes for chat-completion and embedding providers."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class Completion:
    """Text returned by a chat-completion provider plus its usage figures.

    Attributes:
        text: The generated answer.
        model: Model identifier that produced the answer.
        tokens: Prompt + completion tokens reported by the provider (0 if unknown).
        citations: Source URLs for search-backed models such as Perplexity.
    """

    text: str
    model: str
    tokens: int = 0
    citations: tuple[str, ...] = ()


class ChatClient(ABC):
    """Abstract base class for chat-completion providers.

    One implementation per provider family is enough as long as it reports
    token usage on every Completion.

    Example:
        class MyChatClient(ChatClient):
            def complete(self, messages, temperature=None, max_tokens=None):
                reply = my_api.chat(messages, temp=temperature)
                return Completion(text=reply.text, model="mine", tokens=reply.tokens)
    """

    model: str

    @property
    def has_credentials(self) -> bool:
        """True if a credential is available for this client's model."""
        return True

    @abstractmethod
    def complete(
        self,
        messages: list[dict],
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> Completion:
        """Generate a completion for the given messages.

        Args:
            messages: List of message dicts with 'role' and 'content' keys.
                      Example: [{"role": "system", "content": "..."},
                                {"role": "user", "content": "Hello"}]
            temperature: Optional sampling temperature. None = provider default.
            max_tokens: Optional cap on generated tokens.

        Returns:
            The generated Completion.
        """
        ...

    async def acomplete(
        self,
        messages: list[dict],
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> Completion:
        """Generate a completion for the given messages (async).

        Default implementation calls sync complete(). Override in subclasses
        for true async behavior.
        """
        return self.complete(messages, temperature, max_tokens)


class EmbeddingClient(ABC):
    """Abstract base class for embedding providers.

    Example:
        class MyEmbeddingClient(EmbeddingClient):
            def embed(self, texts):
                return my_api.embed_batch(texts)
    """

    model: str

    @abstractmethod
    def embed(self, texts: list[str]) -> list[list[float]]:
        """Generate embedding vectors for multiple texts.

        Returns:
            List of embedding vectors, one per input text.
            Order is preserved (result[i] corresponds to texts[i]).
        """
        ...

    async def aembed(self, texts: list[str]) -> list[list[float]]:
        """Generate embedding vectors (async). Defaults to the sync call."""
        return self.embed(texts)
