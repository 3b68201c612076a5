# tests/external/test_sources.py
"""Tests for the external knowledge sources."""

import httpx
import pytest

from circuitrag.external import (
    DuckDuckGoSource,
    PerplexitySource,
    SearxSource,
    format_duckduckgo_response,
    format_searx_response,
)
from circuitrag.exceptions import ExternalSearchError, ProviderError
from circuitrag.providers import ChatClient, Completion

SEARX_PAYLOAD = {
    "answers": ["2.05 V"],
    "infoboxes": [{"infobox": "VS1", "content": "Linha de alimentação"}],
    "results": [
        {"title": "Manual da placa", "content": "x" * 200},
        {"title": "Fórum", "content": "curto"},
    ],
    "suggestions": ["vs1 tensão", "vs2"],
}


class TestFormatSearx:
    def test_full_payload(self):
        text = format_searx_response(SEARX_PAYLOAD)

        assert text.startswith("Resposta: 2.05 V")
        assert "VS1: Linha de alimentação" in text
        assert "- Manual da placa\n  " + "x" * 150 + "..." in text
        assert "- Fórum\n  curto\n" in text
        assert text.endswith("Termos relacionados: vs1 tensão, vs2")

    def test_empty_payload(self):
        assert format_searx_response({"results": []}) == ""


class TestFormatDuckDuckGo:
    def test_structured_fields(self):
        text = format_duckduckgo_response(
            {
                "AbstractText": "Um regulador de tensão.",
                "AbstractSource": "Wikipedia",
                "RelatedTopics": [{"Text": "LDO"}, {"Text": "Buck"}],
                "Results": [{"Text": "ignored"}],
            }
        )

        assert "Resumo: Um regulador de tensão.\nFonte: Wikipedia" in text
        assert "- LDO\n- Buck" in text
        assert "ignored" not in text

    def test_raw_results_when_nothing_structured(self):
        text = format_duckduckgo_response(
            {
                "Results": [{"Text": "Resultado"}],
                "Infobox": {"content": [{"label": "Tensão", "value": "2.05 V"}]},
            }
        )

        assert "Resultados encontrados:\n- Resultado" in text
        assert "- Tensão: 2.05 V" in text

    def test_empty(self):
        assert format_duckduckgo_response({"Answer": "  "}) == ""


class TestSearxSource:
    async def test_tries_instances_in_order(self):
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url.host)
            if request.url.host == "down.example":
                return httpx.Response(503)
            assert request.url.params["format"] == "json"
            assert request.url.params["q"] == "tensão VS1 português"
            return httpx.Response(200, json=SEARX_PAYLOAD)

        source = SearxSource(
            instances=("https://down.example", "https://up.example"),
            transport=httpx.MockTransport(handler),
        )

        result = await source.search("tensão VS1")

        assert seen == ["down.example", "up.example"]
        assert result is not None
        assert result.source == "external-search-searx"
        assert result.text.startswith("Resposta: 2.05 V")
        assert result.tokens > 0

    async def test_empty_results_are_skipped(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"results": []})

        source = SearxSource(
            instances=("https://a.example",), transport=httpx.MockTransport(handler)
        )

        assert await source.search("VS1", language="en") is None

    async def test_invalid_json_is_skipped(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == "captcha.example":
                return httpx.Response(200, text="<html>captcha</html>")
            return httpx.Response(200, json={"results": []})

        source = SearxSource(
            instances=("https://captcha.example", "https://empty.example"),
            transport=httpx.MockTransport(handler),
        )

        assert await source.search("VS1") is None

    async def test_every_instance_failing_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503)

        source = SearxSource(
            instances=("https://a.example", "https://b.example"),
            transport=httpx.MockTransport(handler),
        )

        with pytest.raises(ExternalSearchError, match="All 2 Searx instances failed"):
            await source.search("VS1")


class TestDuckDuckGoSource:
    async def test_search(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.params["q"] == "VS1"
            return httpx.Response(200, json={"Answer": "2.05 V"})

        source = DuckDuckGoSource(transport=httpx.MockTransport(handler))

        result = await source.search("VS1", language="en")

        assert result is not None
        assert result.text == "Resposta: 2.05 V"
        assert result.source == "external-search-ddg"

    async def test_http_error_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500)

        source = DuckDuckGoSource(transport=httpx.MockTransport(handler))

        with pytest.raises(ExternalSearchError, match="DuckDuckGo request failed") as exc_info:
            await source.search("VS1")

        assert isinstance(exc_info.value.__cause__, httpx.HTTPStatusError)


class CannedChatClient(ChatClient):
    model = "perplexity/test"

    def __init__(self, completion: Completion | Exception) -> None:
        self.completion = completion
        self.messages: list[dict] = []

    def complete(self, messages, temperature=None, max_tokens=None) -> Completion:
        self.messages = messages
        if isinstance(self.completion, Exception):
            raise self.completion
        return self.completion


class TestPerplexitySource:
    async def test_appends_citations(self):
        client = CannedChatClient(
            Completion(
                text="O VS1 é 2.05 V.",
                model="perplexity/test",
                tokens=12,
                citations=("https://a", "https://b", "https://c", "https://d"),
            )
        )
        source = PerplexitySource(chat_client=client, api_key="pplx")

        result = await source.search("tensão do VS1")

        assert result is not None
        assert result.text == (
            "O VS1 é 2.05 V.\n\nFontes consultadas:\n- https://a\n- https://b\n- https://c"
        )
        assert result.tokens == 12
        assert client.messages[1]["content"] == "tensão do VS1 (Responda em português do Brasil)"

    async def test_blank_answer(self):
        client = CannedChatClient(Completion(text="  ", model="perplexity/test"))

        assert await PerplexitySource(chat_client=client, api_key="k").search("VS1") is None

    def test_unavailable_without_key(self, monkeypatch):
        monkeypatch.delenv("PERPLEXITY_API_KEY", raising=False)

        assert PerplexitySource().available is False
        assert PerplexitySource(api_key="k").available is True

    async def test_provider_error_becomes_search_error(self):
        client = CannedChatClient(ProviderError("quota", model="perplexity/test"))

        with pytest.raises(ExternalSearchError, match="Perplexity search failed: quota"):
            await PerplexitySource(chat_client=client, api_key="k").search("VS1")
