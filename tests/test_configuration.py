# tests/test_configuration.py
"""Tests for the provider and storage configuration objects."""

import dataclasses
import os

import pytest

from circuitrag.configuration import (
    LiteLLMProvider,
    LocalStorage,
    ProviderConfig,
    StorageConfig,
)
from circuitrag.external import DuckDuckGoSource, PerplexitySource, SearxSource
from circuitrag.settings import Settings
from circuitrag.stores import SQLiteChunkStore, SQLiteDocumentStore
from circuitrag.usage import SQLiteUsageLogger


class TestLiteLLMProvider:
    def test_satisfies_protocol(self):
        assert isinstance(LiteLLMProvider(), ProviderConfig)

    def test_is_frozen(self):
        provider = LiteLLMProvider()
        with pytest.raises(dataclasses.FrozenInstanceError):
            provider.llm = "openai/gpt-4o-mini"  # type: ignore[misc]

    def test_build_embedder(self):
        embedder = LiteLLMProvider(embedding="openai/text-embedding-3-large").build_embedder(
            Settings(embedding_input_limit=100)
        )

        assert embedder.model == "openai/text-embedding-3-large"
        assert embedder.input_limit == 100

    def test_build_generator(self):
        generator = LiteLLMProvider(
            llm="anthropic/claude-3-7-sonnet-20250219", llm_api_key="sk-ant"
        ).build_generator(Settings(max_tokens=200))

        assert generator.model == "anthropic/claude-3-7-sonnet-20250219"
        assert generator.api_key == "sk-ant"
        assert generator.settings.max_tokens == 200

    def test_knowledge_sources_order(self):
        sources = LiteLLMProvider().build_knowledge_sources()

        assert [type(s) for s in sources] == [PerplexitySource, SearxSource, DuckDuckGoSource]

    def test_custom_searx_instances(self):
        sources = LiteLLMProvider(searx_instances=("https://searx.local",)).build_knowledge_sources()

        assert sources[1].instances == ("https://searx.local",)

    def test_searx_disabled(self):
        sources = LiteLLMProvider(searx_instances=()).build_knowledge_sources()

        assert [type(s) for s in sources] == [PerplexitySource, DuckDuckGoSource]


class TestLocalStorage:
    def test_satisfies_protocol(self):
        assert isinstance(LocalStorage("./data"), StorageConfig)

    def test_build_stores_without_vector_index(self, temp_dir):
        data_dir = os.path.join(temp_dir, "nested", "data")

        bundle = LocalStorage(data_dir, use_vector_index=False).build_stores()

        assert isinstance(bundle.documents, SQLiteDocumentStore)
        assert isinstance(bundle.chunks, SQLiteChunkStore)
        assert isinstance(bundle.usage_logger, SQLiteUsageLogger)
        assert bundle.vector_index is None
        assert os.path.isdir(data_dir)
        bundle.close()

    def test_build_stores_with_vector_index(self, temp_dir):
        pytest.importorskip("chromadb")

        bundle = LocalStorage(temp_dir).build_stores()

        assert bundle.vector_index is not None
        assert bundle.vector_index.count() == 0
        bundle.close()
