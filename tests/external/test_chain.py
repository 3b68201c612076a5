# tests/external/test_chain.py
"""Tests for ExternalSearchChain and the structured fallback answer."""

from circuitrag.exceptions import ExternalSearchError
from circuitrag.external import (
    ExternalResult,
    ExternalSearchChain,
    KnowledgeSource,
    TopicCache,
    generate_fallback_response,
)
from circuitrag.stores import InMemoryTopicStore
from circuitrag.usage import InMemoryUsageLogger


class RecordingSource(KnowledgeSource):
    def __init__(self, name, outcome=None, available=True):
        self.name = name
        self.outcome = outcome
        self._available = available
        self.queries: list[tuple[str, str]] = []

    @property
    def available(self) -> bool:
        return self._available

    async def search(self, query, language="pt"):
        self.queries.append((query, language))
        if isinstance(self.outcome, Exception):
            raise self.outcome
        if self.outcome is None:
            return None
        return ExternalResult(text=self.outcome, source=self.name, tokens=30)


def make_chain(*sources, store=None):
    logger = InMemoryUsageLogger()
    chain = ExternalSearchChain(
        sources=list(sources),
        topics=TopicCache(store or InMemoryTopicStore()),
        usage_logger=logger,
    )
    return chain, logger


class TestExternalSearchChain:
    async def test_non_technical_query_is_not_searched(self):
        source = RecordingSource("a", "texto")
        chain, logger = make_chain(source)

        assert await chain.search("Como fazer um bolo?") is None
        assert source.queries == []
        assert logger.records == []

    async def test_first_useful_result_wins(self):
        first = RecordingSource("perplexity-search", RuntimeError("timeout"))
        second = RecordingSource("external-search-searx", "  ")
        third = RecordingSource("external-search-ddg", " VS1 = 2.05 V \n")
        chain, logger = make_chain(first, second, third)

        text = await chain.search("tensão do VS1", language="en", user_id="u1", widget_id="w1")

        assert text == "VS1 = 2.05 V"
        assert first.queries == [("tensão do VS1", "en")]
        assert second.queries and third.queries
        assert [(r.model, r.success, r.error_message) for r in logger.records] == [
            ("perplexity-search", False, "timeout"),
            ("external-search-searx", False, "No useful results"),
            ("external-search-ddg", True, None),
        ]
        assert all(r.operation == "search" for r in logger.records)
        record = logger.records[-1]
        assert record.tokens == 30
        assert record.user_id == "u1"
        assert record.widget_id == "w1"

    async def test_unavailable_sources_are_skipped(self):
        missing_key = RecordingSource("perplexity-search", "never", available=False)
        searx = RecordingSource("external-search-searx", "ok")
        chain, _ = make_chain(missing_key, searx)

        assert await chain.search("capacitor estufado") == "ok"
        assert missing_key.queries == []

    async def test_exhausted_sources_give_topic_fallback(self):
        store = InMemoryTopicStore()
        chain, logger = make_chain(RecordingSource("a"), RecordingSource("b"), store=store)

        text = await chain.search("Qual a tensão do capacitor?")

        assert text is not None
        assert text.startswith("Não encontrei informações específicas")
        assert "• tensão\n" in text
        assert "• capacitor\n" in text
        assert [(r.model, r.success) for r in logger.records] == [("a", False), ("b", False)]
        assert store.usage == {"tensão": 1, "capacitor": 1}

    async def test_failed_attempts_are_recorded(self):
        broken = RecordingSource("external-search-ddg", ExternalSearchError("HTTP 503"))
        chain, logger = make_chain(broken)

        await chain.search("Qual a tensão do capacitor?", user_id="u1")

        assert len(logger.records) == 1
        record = logger.records[0]
        assert record.model == "external-search-ddg"
        assert record.operation == "search"
        assert record.success is False
        assert record.error_message == "HTTP 503"
        assert record.user_id == "u1"

    async def test_no_sources_gives_fallback(self):
        chain, _ = make_chain()

        text = await chain.search("falha no firmware", language="en")

        assert text is not None
        assert text.startswith("I couldn't find specific information")

    def test_should_search(self):
        chain, _ = make_chain()

        assert chain.should_search("Troca de capacitor")
        assert not chain.should_search("receita de bolo")


class TestGenerateFallbackResponse:
    def test_portuguese(self):
        text = generate_fallback_response(["tensão", "vs1"])

        assert "Esta parece ser uma questão técnica importante relacionada a:\n" in text
        assert "• tensão\n• vs1\n" in text
        assert "Recomendações:" in text
        assert text.count("\n• ") >= 6

    def test_english(self):
        text = generate_fallback_response(["firmware"], language="en")

        assert "related to:\n• firmware\n" in text
        assert "Recommendations:" in text

    def test_unknown_language_uses_portuguese(self):
        assert generate_fallback_response([], language="de").startswith("Não encontrei")
