"""DuckDuckGo instant-answer API as a knowledge source."""

import logging
from typing import Any

import httpx

from circuitrag.exceptions import ExternalSearchError
from circuitrag.external.base import ExternalResult, KnowledgeSource, estimate_tokens

logger = logging.getLogger(__name__)

DUCKDUCKGO_URL = "https://api.duckduckgo.com/"


def format_duckduckgo_response(data: dict[str, Any]) -> str:
    """Render an instant-answer payload as plain text.

    Structured fields (answer, abstract, definition, related topics) are
    preferred; raw results and the infobox are only used when none exist.
    """
    result = ""

    if (data.get("Answer") or "").strip():
        result += f"Resposta: {data['Answer']}\n\n"

    if (data.get("AbstractText") or "").strip():
        result += f"Resumo: {data['AbstractText']}\n"
        if data.get("AbstractSource"):
            result += f"Fonte: {data['AbstractSource']}\n"
        result += "\n"

    if (data.get("Definition") or "").strip():
        result += f"Definição: {data['Definition']}\n"
        if data.get("DefinitionSource"):
            result += f"Fonte: {data['DefinitionSource']}\n"
        result += "\n"

    related = data.get("RelatedTopics") or []
    if related:
        result += "Tópicos relacionados:\n"
        for topic in related[:3]:
            if topic.get("Text"):
                result += f"- {topic['Text']}\n"
        result += "\n"

    if result.strip():
        return result.strip()

    raw_results = data.get("Results") or []
    if raw_results:
        result += "Resultados encontrados:\n"
        for item in raw_results[:3]:
            if item.get("Text"):
                result += f"- {item['Text']}\n"
        result += "\n"

    infobox = data.get("Infobox") or {}
    entries = infobox.get("content") if isinstance(infobox, dict) else None
    if entries:
        result += "Informações adicionais:\n"
        for item in entries[:5]:
            if item.get("label") and item.get("value"):
                result += f"- {item['label']}: {item['value']}\n"
        result += "\n"

    return result.strip()


class DuckDuckGoSource(KnowledgeSource):
    name = "external-search-ddg"

    def __init__(
        self,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.timeout = timeout
        self._transport = transport

    async def search(self, query: str, language: str = "pt") -> ExternalResult | None:
        params = {
            "q": f"{query} português" if language == "pt" else query,
            "format": "json",
            "skip_disambig": "1",
            "no_html": "1",
            "no_redirect": "1",
        }
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.get(DUCKDUCKGO_URL, params=params)
                response.raise_for_status()
                text = format_duckduckgo_response(response.json())
        except (httpx.HTTPError, ValueError) as e:
            raise ExternalSearchError(f"DuckDuckGo request failed: {e}") from e

        if not text:
            logger.info("DuckDuckGo returned no structured results")
            return None
        return ExternalResult(text=text, source=self.name, tokens=estimate_tokens(query, text))
