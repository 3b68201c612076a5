# tests/providers/test_litellm_client.py
"""Tests for the LiteLLM chat client and model helpers."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from circuitrag.exceptions import ConfigurationError, EmbeddingError, ProviderError
from circuitrag.providers import ChatClient, ChatModels, Completion, LiteLLMClient
from circuitrag.providers.litellm import LiteLLMEmbeddingClient, provider_family, resolve_api_key


def mock_completion_response(content, total_tokens=30, citations=None):
    """Create a mock LiteLLM completion response."""
    response = MagicMock()
    response.choices = [MagicMock()]
    response.choices[0].message.content = content
    response.usage = MagicMock(total_tokens=total_tokens)
    response.citations = citations
    return response


class TestProviderFamily:
    @pytest.mark.parametrize(
        "model,family",
        [
            ("openai/gpt-4o", "openai"),
            ("gpt-4o-mini", "openai"),
            ("anthropic/claude-3-7-sonnet-20250219", "anthropic"),
            ("claude-3-haiku", "anthropic"),
            ("perplexity/llama-3.1-sonar-small-128k-online", "perplexity"),
            ("ollama/llama3", "local"),
        ],
    )
    def test_family(self, model, family):
        assert provider_family(model) == family


class TestResolveApiKey:
    def test_explicit_key_wins(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "from-env")
        assert resolve_api_key("openai/gpt-4o", "explicit") == "explicit"

    def test_env_key(self, monkeypatch):
        monkeypatch.setenv("ANTHROPIC_API_KEY", "from-env")
        assert resolve_api_key("anthropic/claude-3-7-sonnet-20250219") == "from-env"

    def test_missing_key(self, monkeypatch):
        monkeypatch.delenv("PERPLEXITY_API_KEY", raising=False)
        assert resolve_api_key(ChatModels.SONAR_SMALL_ONLINE) is None

    def test_local_models_need_no_key(self):
        assert resolve_api_key("ollama/llama3") == ""


class TestLiteLLMClient:
    def test_is_chat_client(self):
        assert isinstance(LiteLLMClient(), ChatClient)

    @patch("circuitrag.providers.litellm.client.litellm.completion")
    def test_complete(self, mock_completion):
        mock_completion.return_value = mock_completion_response("O VS1 tem 2.05 V.")

        client = LiteLLMClient(model="openai/gpt-4o", api_key="sk-test")
        result = client.complete([{"role": "user", "content": "VS1?"}], temperature=0.3)

        assert result == Completion(text="O VS1 tem 2.05 V.", model="openai/gpt-4o", tokens=30)
        kwargs = mock_completion.call_args.kwargs
        assert kwargs["model"] == "openai/gpt-4o"
        assert kwargs["api_key"] == "sk-test"
        assert kwargs["temperature"] == 0.3
        assert "max_tokens" not in kwargs

    @patch("circuitrag.providers.litellm.client.litellm.acompletion", new_callable=AsyncMock)
    async def test_acomplete_with_citations(self, mock_acompletion):
        mock_acompletion.return_value = mock_completion_response(
            "answer", citations=["https://example.com/a"]
        )

        client = LiteLLMClient(model=ChatModels.SONAR_SMALL_ONLINE, api_key="pplx")
        result = await client.acomplete([{"role": "user", "content": "q"}], max_tokens=50)

        assert result.citations == ("https://example.com/a",)
        assert mock_acompletion.call_args.kwargs["max_tokens"] == 50

    @patch("circuitrag.providers.litellm.client.litellm.completion")
    def test_none_content_raises(self, mock_completion):
        mock_completion.return_value = mock_completion_response(None)

        with pytest.raises(ProviderError, match="None content"):
            LiteLLMClient(api_key="sk-test").complete([{"role": "user", "content": "q"}])

    def test_missing_credential_raises(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)

        with pytest.raises(ConfigurationError):
            LiteLLMClient().complete([{"role": "user", "content": "q"}])

    def test_has_credentials(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        assert LiteLLMClient().has_credentials is False
        assert LiteLLMClient(api_key="sk").has_credentials is True

    @patch("circuitrag.providers.litellm.client.litellm.acompletion", new_callable=AsyncMock)
    async def test_provider_failure_is_wrapped(self, mock_acompletion):
        cause = RuntimeError("401 invalid api key")
        mock_acompletion.side_effect = cause

        client = LiteLLMClient(model="openai/gpt-4o", api_key="sk-test")
        with pytest.raises(ProviderError, match="401 invalid api key") as exc_info:
            await client.acomplete([{"role": "user", "content": "q"}])

        assert exc_info.value.model == "openai/gpt-4o"
        assert exc_info.value.__cause__ is cause

    def test_base_client_assumes_credentials(self):
        class Local(ChatClient):
            model = "local"

            def complete(self, messages, temperature=None, max_tokens=None):
                return Completion(text="ok", model=self.model)

        assert Local().has_credentials is True


class TestLiteLLMEmbeddingClientErrors:
    @patch("circuitrag.providers.litellm.client.litellm.embedding")
    def test_provider_failure_is_wrapped(self, mock_embedding):
        mock_embedding.side_effect = RuntimeError("quota")

        with pytest.raises(EmbeddingError, match="quota"):
            LiteLLMEmbeddingClient(api_key="sk-test").embed(["texto"])
