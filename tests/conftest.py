"""Shared pytest fixtures."""

import contextlib
import tempfile
from dataclasses import dataclass, field
from typing import Any

import pytest

from circuitrag.embedder import Embedder
from circuitrag.generation import AnswerGenerator
from circuitrag.providers import ChatClient, Completion
from circuitrag.stores import (
    InMemoryChunkStore,
    InMemoryDocumentStore,
    InMemoryKnowledgeStore,
    InMemoryTopicStore,
)
from circuitrag.usage import InMemoryUsageLogger

VOCABULARY = ("tensão", "vs1", "corrente", "capacitor", "solda", "firmware", "bolo")


class KeywordEmbedder(Embedder):
    """Deterministic embedder: one dimension per vocabulary word."""

    model = "test/keyword-embedding"

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.calls: list[str] = []

    def embed_text(self, text: str) -> list[float]:
        self.calls.append(text)
        if self.fail:
            raise RuntimeError("embedding service down")
        lowered = text.lower()
        return [1.0 if word in lowered else 0.0 for word in VOCABULARY] + [0.01]


class ScriptedChatClient(ChatClient):
    """Chat client that replays scripted answers (or raises) per call."""

    def __init__(self, model: str, script: "Script") -> None:
        self.model = model
        self.script = script

    @property
    def has_credentials(self) -> bool:
        return self.model not in self.script.missing_credentials

    def complete(self, messages, temperature=None, max_tokens=None) -> Completion:
        self.script.calls.append((self.model, messages))
        outcome = self.script.next_for(self.model)
        if isinstance(outcome, Exception):
            raise outcome
        return Completion(text=outcome, model=self.model, tokens=42)


@dataclass
class Script:
    """Answers handed out per model, in order. The last answer repeats."""

    answers: dict[str, list[Any]] = field(default_factory=dict)
    default: Any = "Resposta de teste."
    calls: list[tuple[str, list[dict]]] = field(default_factory=list)
    missing_credentials: set[str] = field(default_factory=set)

    def next_for(self, model: str) -> Any:
        queue = self.answers.get(model)
        if not queue:
            return self.default
        return queue.pop(0) if len(queue) > 1 else queue[0]

    def factory(self, model: str, api_key: str | None) -> ChatClient:
        return ScriptedChatClient(model, self)

    def system_prompts(self) -> list[str]:
        return [messages[0]["content"] for _, messages in self.calls]


@dataclass(frozen=True)
class FakeProvider:
    """Provider that satisfies the ProviderConfig protocol without network access."""

    script: Script
    embedder: Embedder
    sources: tuple = ()

    def build_embedder(self, settings: Any, usage_logger: Any = None) -> Embedder:
        return self.embedder

    def build_generator(self, settings: Any, usage_logger: Any = None) -> AnswerGenerator:
        return AnswerGenerator(
            model="openai/gpt-4o",
            settings=settings,
            usage_logger=usage_logger,
            client_factory=self.script.factory,
        )

    def build_knowledge_sources(self) -> list:
        return list(self.sources)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for stores."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir

        # Cleanup ChromaDB's shared system cache to release file handles
        # See: https://github.com/chroma-core/chroma/issues/5868
        try:
            from chromadb.api.shared_system_client import SharedSystemClient

            if hasattr(SharedSystemClient, "_identifier_to_system"):
                identifiers_to_remove = [
                    identifier
                    for identifier in list(SharedSystemClient._identifier_to_system.keys())
                    if tmpdir in str(identifier)
                ]
                for identifier in identifiers_to_remove:
                    if identifier in SharedSystemClient._identifier_to_system:
                        system = SharedSystemClient._identifier_to_system.pop(identifier)
                        with contextlib.suppress(Exception):
                            system.stop()
        except Exception:
            pass  # Best effort cleanup - ChromaDB internals may change


@pytest.fixture
def embedder():
    return KeywordEmbedder()


@pytest.fixture
def failing_embedder():
    return KeywordEmbedder(fail=True)


@pytest.fixture
def script():
    return Script()


@pytest.fixture
def usage_logger():
    return InMemoryUsageLogger()


@pytest.fixture
def provider(script, embedder):
    return FakeProvider(script=script, embedder=embedder)


@pytest.fixture
def make_provider(script, embedder):
    """Build a FakeProvider sharing the test script, with custom embedder or sources."""

    def make(embedder_override: Embedder | None = None, sources: tuple = ()) -> FakeProvider:
        return FakeProvider(
            script=script, embedder=embedder_override or embedder, sources=sources
        )

    return make


@pytest.fixture
def memory_stores():
    """In-memory stores keyed like the CircuitRAG.from_stores arguments."""
    return {
        "document_store": InMemoryDocumentStore(),
        "chunk_store": InMemoryChunkStore(),
        "knowledge_store": InMemoryKnowledgeStore(),
        "topic_store": InMemoryTopicStore(),
    }


@pytest.fixture
def rag(provider, memory_stores, usage_logger):
    """CircuitRAG over in-memory stores and the fake provider."""
    from circuitrag import CircuitRAG

    return CircuitRAG.from_stores(provider=provider, usage_logger=usage_logger, **memory_stores)
