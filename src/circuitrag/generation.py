# src/circuitrag/generation.py
"""Answer generation with a single cross-provider fallback."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from circuitrag.models import UsageRecord
from circuitrag.prompts import apology_message, fallback_system_prompt
from circuitrag.providers import (
    Attempt,
    ChatClient,
    ChatModels,
    Completion,
    FallbackChain,
    FallbackExhausted,
    LiteLLMClient,
    provider_family,
)
from circuitrag.settings import Settings
from circuitrag.usage import LoggingUsageLogger, UsageLogger

logger = logging.getLogger(__name__)

ChatClientFactory = Callable[[str, "str | None"], ChatClient]


@dataclass(frozen=True)
class GenerationResult:
    """Outcome of one generation request.

    Attributes:
        text: The answer, or the localized apology when every provider failed.
        model: Model that produced the answer (None on failure).
        used_fallback: True if the alternate provider produced the answer.
        failed: True if no provider produced an answer.
        fallback_attempted: True if the alternate provider was called.
    """

    text: str
    model: str | None
    used_fallback: bool = False
    failed: bool = False
    fallback_attempted: bool = False


def _accept(result: tuple[str, Completion] | None) -> bool:
    return result is not None and bool(result[1].text.strip())


class AnswerGenerator:
    """Calls the configured chat model, falling back once to the other provider.

    The primary call uses the full system prompt. If it raises (auth, quota,
    network) or returns nothing, a lighter model from the other provider
    family is tried with a short generic system prompt, provided a credential
    for it exists. Every call is recorded with the usage logger. Exhausting
    both yields a localized apology; provider exceptions never escape.

    Example:
        generator = AnswerGenerator(model="openai/gpt-4o")
        result = await generator.generate(system_prompt, "Qual a tensão do VS1?")
    """

    def __init__(
        self,
        model: str = ChatModels.GPT_4O,
        api_key: str | None = None,
        settings: Settings | None = None,
        usage_logger: UsageLogger | None = None,
        client_factory: ChatClientFactory | None = None,
    ) -> None:
        """Initialize the generator.

        Args:
            model: Default chat model (LiteLLM identifier)
            api_key: Credential for the default model. The fallback provider
                only ever uses its environment credential.
            settings: Temperatures, token cap and fallback models
            usage_logger: Sink for usage records (defaults to logging)
            client_factory: Builds a ChatClient for (model, api_key).
                Defaults to LiteLLMClient.
        """
        self.model = model
        self.api_key = api_key
        self.settings = settings or Settings()
        self.usage_logger = usage_logger or LoggingUsageLogger()
        self._client_factory = client_factory or self._default_client

    def _default_client(self, model: str, api_key: str | None) -> ChatClient:
        return LiteLLMClient(model=model, api_key=api_key, num_retries=self.settings.num_retries)

    def fallback_model_for(self, model: str) -> str:
        """Lighter model from the opposite provider family."""
        other = "openai" if provider_family(model) == "anthropic" else "anthropic"
        return self.settings.fallback_models[other]

    async def generate(
        self,
        system_prompt: str,
        query: str,
        language: str = "pt",
        model: str | None = None,
        user_id: str | None = None,
        widget_id: str | None = None,
    ) -> GenerationResult:
        primary_model = model or self.model
        fallback_model = self.fallback_model_for(primary_model)
        primary_key = self.api_key if primary_model == self.model else None

        async def call(
            client: ChatClient, prompt: str, temperature: float
        ) -> tuple[str, Completion]:
            messages = [
                {"role": "system", "content": prompt},
                {"role": "user", "content": query},
            ]
            try:
                completion = await client.acomplete(
                    messages, temperature=temperature, max_tokens=self.settings.max_tokens
                )
            except Exception as e:
                self._record(client.model, False, user_id, widget_id, 0, str(e))
                raise
            self._record(client.model, True, user_id, widget_id, completion.tokens)
            return client.model, completion

        primary_client = self._client_factory(primary_model, primary_key)
        attempts: list[Attempt[tuple[str, Completion]]] = [
            Attempt(
                primary_model,
                lambda: call(primary_client, system_prompt, self.settings.temperature),
            )
        ]
        fallback_client = self._client_factory(fallback_model, None)
        if fallback_client.has_credentials:
            attempts.append(
                Attempt(
                    fallback_model,
                    lambda: call(
                        fallback_client,
                        fallback_system_prompt(language),
                        self.settings.fallback_temperature,
                    ),
                )
            )
        else:
            logger.info("No credential for fallback model %s, skipping it", fallback_model)

        chain: FallbackChain[tuple[str, Completion]] = FallbackChain(attempts, accept=_accept)

        try:
            used_model, completion = await chain.run()
        except FallbackExhausted as e:
            logger.error("Answer generation failed for every provider: %s", e.errors)
            return GenerationResult(
                text=apology_message(language),
                model=None,
                failed=True,
                fallback_attempted=len(attempts) > 1,
            )

        used_fallback = used_model != primary_model
        if used_fallback:
            logger.info("Answer produced by fallback model %s", used_model)
        return GenerationResult(
            text=completion.text,
            model=used_model,
            used_fallback=used_fallback,
            fallback_attempted=used_fallback,
        )

    def _record(
        self,
        model: str,
        success: bool,
        user_id: str | None,
        widget_id: str | None,
        tokens: int,
        error_message: str | None = None,
    ) -> None:
        self.usage_logger.log(
            UsageRecord(
                model=model,
                operation="text",
                success=success,
                user_id=user_id,
                widget_id=widget_id,
                tokens=tokens,
                error_message=error_message,
            )
        )
