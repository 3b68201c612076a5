"""Perplexity online models as a knowledge source."""

from circuitrag.exceptions import CircuitRAGError, ExternalSearchError
from circuitrag.external.base import ExternalResult, KnowledgeSource
from circuitrag.providers import ChatClient, ChatModels, LiteLLMClient, resolve_api_key

SYSTEM_PROMPTS = {
    "pt": (
        "Você é um especialista em manutenção de placas de circuito e eletrônica. "
        "Forneça informações técnicas precisas e relevantes, focando em aspectos práticos "
        "e apresentando valores específicos quando disponíveis. "
        "Priorize respostas concisas e diretas."
    ),
    "en": (
        "You are an expert in circuit board maintenance and electronics. "
        "Provide accurate and relevant technical information, focusing on practical aspects "
        "and presenting specific values when available. "
        "Prioritize concise and direct answers."
    ),
}

SOURCES_HEADER = {"pt": "Fontes consultadas:", "en": "Sources:"}

MAX_CITATIONS = 3


class PerplexitySource(KnowledgeSource):
    """Asks a Perplexity online model, appending up to three citations.

    Only available when a Perplexity credential is configured.
    """

    name = "perplexity-search"

    def __init__(
        self,
        chat_client: ChatClient | None = None,
        model: str = ChatModels.SONAR_SMALL_ONLINE,
        api_key: str | None = None,
        temperature: float = 0.2,
        max_tokens: int = 500,
    ) -> None:
        self.model = model
        self.api_key = api_key
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._client = chat_client or LiteLLMClient(model=model, api_key=api_key)

    @property
    def available(self) -> bool:
        return resolve_api_key(self.model, self.api_key) is not None

    async def search(self, query: str, language: str = "pt") -> ExternalResult | None:
        user_message = f"{query} (Responda em português do Brasil)" if language == "pt" else query
        messages = [
            {"role": "system", "content": SYSTEM_PROMPTS.get(language, SYSTEM_PROMPTS["pt"])},
            {"role": "user", "content": user_message},
        ]
        try:
            completion = await self._client.acomplete(
                messages, temperature=self.temperature, max_tokens=self.max_tokens
            )
        except CircuitRAGError as e:
            raise ExternalSearchError(f"Perplexity search failed: {e}") from e
        text = completion.text.strip()
        if not text:
            return None

        if completion.citations:
            header = SOURCES_HEADER.get(language, SOURCES_HEADER["pt"])
            lines = [f"- {url}" for url in completion.citations[:MAX_CITATIONS]]
            text += f"\n\n{header}\n" + "\n".join(lines)

        return ExternalResult(text=text, source=self.name, tokens=completion.tokens)
