"""LiteLLM client implementations for chat-completion and embedding APIs."""

from typing import Any

import litellm

from circuitrag.exceptions import ConfigurationError, EmbeddingError, ProviderError
from circuitrag.providers.base import ChatClient, Completion, EmbeddingClient
from circuitrag.providers.litellm.models import ChatModels, EmbeddingModels, resolve_api_key


def _usage_tokens(response: Any) -> int:
    usage = getattr(response, "usage", None)
    if usage is None:
        return 0
    total = getattr(usage, "total_tokens", None)
    if isinstance(total, int):
        return total
    prompt = getattr(usage, "prompt_tokens", 0)
    completion = getattr(usage, "completion_tokens", 0)
    if isinstance(prompt, int) and isinstance(completion, int):
        return prompt + completion
    return 0


class LiteLLMClient(ChatClient):
    """LiteLLM-based chat client.

    Supports any model available through LiteLLM (OpenAI, Anthropic,
    Perplexity, local Ollama models, etc.).

    Example:
        from circuitrag.providers.litellm import LiteLLMClient, ChatModels

        client = LiteLLMClient(model=ChatModels.GPT_4O)
        completion = client.complete([{"role": "user", "content": "Hello"}])
    """

    def __init__(
        self,
        model: str = ChatModels.GPT_4O,
        api_key: str | None = None,
        num_retries: int = 3,
    ) -> None:
        """Initialize the LiteLLM client.

        Args:
            model: LiteLLM model identifier.
                   Examples: "openai/gpt-4o", "anthropic/claude-3-7-sonnet-20250219"
            api_key: Explicit credential. If None, the provider family's
                     environment variable is used at call time.
            num_retries: Number of retries on rate limit errors. LiteLLM handles
                        exponential backoff automatically. Default: 3.
        """
        self.model = model
        self.api_key = api_key
        self.num_retries = num_retries

    @property
    def has_credentials(self) -> bool:
        """True if a credential can be resolved for this model."""
        return resolve_api_key(self.model, self.api_key) is not None

    def _completion_kwargs(
        self,
        messages: list[dict],
        temperature: float | None,
        max_tokens: int | None,
    ) -> dict[str, Any]:
        api_key = resolve_api_key(self.model, self.api_key)
        if api_key is None:
            raise ConfigurationError(f"No API key available for model {self.model}")

        completion_kwargs: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "drop_params": True,
            "num_retries": self.num_retries,
        }
        if api_key:
            completion_kwargs["api_key"] = api_key
        if temperature is not None:
            completion_kwargs["temperature"] = temperature
        if max_tokens is not None:
            completion_kwargs["max_tokens"] = max_tokens
        return completion_kwargs

    def _to_completion(self, response: Any) -> Completion:
        if not response.choices:
            raise ProviderError(f"LLM returned no choices for model {self.model}", self.model)
        content = response.choices[0].message.content
        if content is None:
            raise ProviderError(f"LLM returned None content for model {self.model}", self.model)
        citations = getattr(response, "citations", None) or ()
        return Completion(
            text=str(content),
            model=self.model,
            tokens=_usage_tokens(response),
            citations=tuple(str(c) for c in citations),
        )

    def complete(
        self,
        messages: list[dict],
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> Completion:
        """Generate a completion using LiteLLM.

        Raises:
            ConfigurationError: No credential resolves for the model.
            ProviderError: The provider call failed or returned no content.
        """
        kwargs = self._completion_kwargs(messages, temperature, max_tokens)
        try:
            response = litellm.completion(**kwargs)
        except Exception as e:
            raise ProviderError(str(e), self.model) from e
        return self._to_completion(response)

    async def acomplete(
        self,
        messages: list[dict],
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> Completion:
        """Generate a completion using LiteLLM (async)."""
        kwargs = self._completion_kwargs(messages, temperature, max_tokens)
        try:
            response = await litellm.acompletion(**kwargs)
        except Exception as e:
            raise ProviderError(str(e), self.model) from e
        return self._to_completion(response)


class LiteLLMEmbeddingClient(EmbeddingClient):
    """LiteLLM-based embedding client.

    Example:
        from circuitrag.providers.litellm import LiteLLMEmbeddingClient, EmbeddingModels

        client = LiteLLMEmbeddingClient(model=EmbeddingModels.TEXT_3_SMALL)
        embeddings = client.embed(["Hello world", "How are you?"])
    """

    def __init__(
        self,
        model: str = EmbeddingModels.TEXT_3_SMALL,
        api_key: str | None = None,
        num_retries: int = 3,
    ) -> None:
        """Initialize the LiteLLM embedding client.

        Args:
            model: LiteLLM embedding model identifier.
            api_key: Explicit credential. If None, the provider family's
                     environment variable is used at call time.
            num_retries: Number of retries on rate limit errors. Default: 3.
        """
        self.model = model
        self.api_key = api_key
        self.num_retries = num_retries

    def _embedding_kwargs(self, texts: list[str]) -> dict[str, Any]:
        api_key = resolve_api_key(self.model, self.api_key)
        if api_key is None:
            raise ConfigurationError(f"No API key available for embedding model {self.model}")
        kwargs: dict[str, Any] = {
            "model": self.model,
            "input": texts,
            "num_retries": self.num_retries,
        }
        if api_key:
            kwargs["api_key"] = api_key
        return kwargs

    def embed(self, texts: list[str]) -> list[list[float]]:
        """Generate embeddings using LiteLLM."""
        if not texts:
            return []

        kwargs = self._embedding_kwargs(texts)
        try:
            response = litellm.embedding(**kwargs)
        except Exception as e:
            raise EmbeddingError(str(e)) from e
        # Sort by index to maintain order
        sorted_data = sorted(response.data, key=lambda x: x["index"])
        return [item["embedding"] for item in sorted_data]

    async def aembed(self, texts: list[str]) -> list[list[float]]:
        """Generate embeddings using LiteLLM (async)."""
        if not texts:
            return []

        kwargs = self._embedding_kwargs(texts)
        try:
            response = await litellm.aembedding(**kwargs)
        except Exception as e:
            raise EmbeddingError(str(e)) from e
        sorted_data = sorted(response.data, key=lambda x: x["index"])
        return [item["embedding"] for item in sorted_data]
