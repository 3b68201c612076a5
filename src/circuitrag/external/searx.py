"""Public Searx instances as a knowledge source."""

import logging
from typing import Any

import httpx

from circuitrag.exceptions import ExternalSearchError
from circuitrag.external.base import ExternalResult, KnowledgeSource, estimate_tokens

logger = logging.getLogger(__name__)

# Public instances come and go; they are tried in order
SEARX_INSTANCES = (
    "https://searx.be",
    "https://search.mdosch.de",
    "https://search.disroot.org",
    "https://search.unlocked.link",
)

HEADERS = {"User-Agent": "ToledoIA Search/1.0", "Accept": "application/json"}

MAX_RESULTS = 5
MAX_SUGGESTIONS = 5
SNIPPET_LENGTH = 150


def format_searx_response(data: dict[str, Any]) -> str:
    """Render a Searx JSON payload as plain text. Empty string if nothing useful."""
    result = ""

    answers = data.get("answers") or []
    if answers:
        result += f"Resposta: {answers[0]}\n\n"

    infoboxes = data.get("infoboxes") or []
    if infoboxes:
        infobox = infoboxes[0]
        result += f"{infobox.get('infobox', '')}: {infobox.get('content', '')}\n\n"

    results = data.get("results") or []
    if results:
        result += "Resultados encontrados:\n"
        for item in results[:MAX_RESULTS]:
            content = item.get("content") or ""
            ellipsis = "..." if len(content) > SNIPPET_LENGTH else ""
            result += f"- {item.get('title', '')}\n  {content[:SNIPPET_LENGTH]}{ellipsis}\n\n"

    suggestions = data.get("suggestions") or []
    if suggestions:
        result += "Termos relacionados: " + ", ".join(suggestions[:MAX_SUGGESTIONS]) + "\n\n"

    return result.strip()


class SearxSource(KnowledgeSource):
    """Queries Searx instances in order until one returns something useful.

    Instances that fail are skipped. ExternalSearchError is raised only when
    every instance failed; None means they answered with nothing useful.
    """

    name = "external-search-searx"

    def __init__(
        self,
        instances: tuple[str, ...] = SEARX_INSTANCES,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.instances = instances
        self.timeout = timeout
        self._transport = transport

    async def search(self, query: str, language: str = "pt") -> ExternalResult | None:
        params = {
            "q": f"{query} português" if language == "pt" else query,
            "format": "json",
            "language": "pt-BR" if language == "pt" else "en-US",
            "categories": "general",
        }

        failures = 0
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            for base_url in self.instances:
                try:
                    response = await client.get(
                        f"{base_url}/search", params=params, headers=HEADERS
                    )
                    response.raise_for_status()
                    text = format_searx_response(response.json())
                except (httpx.HTTPError, ValueError) as e:
                    logger.warning("Searx instance %s failed: %s", base_url, e)
                    failures += 1
                    continue
                if text:
                    return ExternalResult(
                        text=text, source=self.name, tokens=estimate_tokens(query, text)
                    )

        if self.instances and failures == len(self.instances):
            raise ExternalSearchError(f"All {failures} Searx instances failed")
        logger.info("No Searx instance returned useful results")
        return None
