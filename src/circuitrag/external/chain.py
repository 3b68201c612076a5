# src/circuitrag/external/chain.py
"""External knowledge lookup: Perplexity, then Searx, then DuckDuckGo."""

from __future__ import annotations

import logging

from circuitrag.external.base import ExternalResult, KnowledgeSource
from circuitrag.external.duckduckgo import DuckDuckGoSource
from circuitrag.external.perplexity import PerplexitySource
from circuitrag.external.searx import SearxSource
from circuitrag.external.topics import TopicCache
from circuitrag.models import UsageRecord
from circuitrag.providers import Attempt, FallbackChain, FallbackExhausted
from circuitrag.usage import LoggingUsageLogger, UsageLogger

logger = logging.getLogger(__name__)

_FALLBACK_MESSAGES = {
    "pt": {
        "intro": (
            "Não encontrei informações específicas sobre sua consulta na nossa base "
            "de conhecimento ou em buscas externas."
        ),
        "relevance": "Esta parece ser uma questão técnica importante relacionada a:",
        "suggestion": "Recomendações:",
        "tips": (
            "• Verificar manuais técnicos e datasheets específicos do componente ou equipamento.",
            "• Consultar um especialista se o problema persistir.",
            "• Buscar em fóruns especializados como StackExchange, fóruns de Arduino, "
            "ou comunidades de eletrônica.",
            "• Considerar adicionar documentação sobre este tema à base de conhecimento "
            "do sistema.",
        ),
    },
    "en": {
        "intro": (
            "I couldn't find specific information about your query in our knowledge "
            "base or through external searches."
        ),
        "relevance": "This appears to be an important technical question related to:",
        "suggestion": "Recommendations:",
        "tips": (
            "• Check technical manuals and datasheets specific to the component or equipment.",
            "• Consult an expert if the problem persists.",
            "• Search specialized forums such as StackExchange, Arduino forums, "
            "or electronics communities.",
            "• Consider adding documentation about this topic to the system's knowledge base.",
        ),
    },
}


def generate_fallback_response(topics: list[str], language: str = "pt") -> str:
    """Structured "nothing found" answer listing the topics the query touched."""
    messages = _FALLBACK_MESSAGES.get(language, _FALLBACK_MESSAGES["pt"])
    response = f"{messages['intro']}\n\n{messages['relevance']}\n"
    response += "".join(f"• {topic}\n" for topic in topics)
    response += f"\n{messages['suggestion']}\n" + "\n".join(messages["tips"])
    return response


def _useful(result: ExternalResult | None) -> bool:
    return result is not None and bool(result.text.strip())


def default_sources() -> list[KnowledgeSource]:
    return [PerplexitySource(), SearxSource(), DuckDuckGoSource()]


class ExternalSearchChain:
    """Looks a technical query up in external sources, first success wins.

    Queries that mention no known technical topic are not searched at all.
    Sources that are not configured (no Perplexity key) are skipped. When
    every source comes back empty, a structured fallback listing the
    query's topics is returned instead, or None if it has no topics.
    Each source that is tried gets one "search" usage record.
    """

    def __init__(
        self,
        sources: list[KnowledgeSource] | None = None,
        topics: TopicCache | None = None,
        usage_logger: UsageLogger | None = None,
    ) -> None:
        self.sources = default_sources() if sources is None else sources
        self.topics = topics or TopicCache()
        self.usage_logger = usage_logger or LoggingUsageLogger()

    def should_search(self, query: str) -> bool:
        try:
            return self.topics.should_use_external_search(query)
        except Exception as e:
            logger.error("Could not decide whether to search externally: %s", e)
            return False

    async def search(
        self,
        query: str,
        language: str = "pt",
        user_id: str | None = None,
        widget_id: str | None = None,
    ) -> str | None:
        if not self.should_search(query):
            logger.info("Query does not qualify for external search: %r", query)
            return None

        async def call(source: KnowledgeSource) -> ExternalResult | None:
            try:
                result = await source.search(query, language)
            except Exception as e:
                self._record(source.name, False, user_id, widget_id, error_message=str(e))
                raise
            if _useful(result):
                self._record(result.source, True, user_id, widget_id, tokens=result.tokens)
            else:
                self._record(
                    source.name, False, user_id, widget_id, error_message="No useful results"
                )
            return result

        attempts = [
            Attempt(source.name, lambda source=source: call(source))
            for source in self.sources
            if source.available
        ]
        chain: FallbackChain[ExternalResult | None] = FallbackChain(attempts, accept=_useful)
        try:
            result = await chain.run()
        except FallbackExhausted as e:
            logger.info("No external source returned useful results: %s", e)
            return self._fallback(query, language)
        return result.text.strip()  # type: ignore[union-attr]

    def _record(
        self,
        source: str,
        success: bool,
        user_id: str | None,
        widget_id: str | None,
        tokens: int = 0,
        error_message: str | None = None,
    ) -> None:
        self.usage_logger.log(
            UsageRecord(
                model=source,
                operation="search",
                success=success,
                user_id=user_id,
                widget_id=widget_id,
                tokens=tokens,
                error_message=error_message,
            )
        )

    def _fallback(self, query: str, language: str) -> str | None:
        try:
            found = self.topics.topics_in_query(query)
        except Exception as e:
            logger.error("Could not identify technical topics for fallback: %s", e)
            return None
        if not found:
            return None
        return generate_fallback_response(found, language)
