"""External knowledge sources used when the corpus can't answer a question."""

from circuitrag.external.base import ExternalResult, KnowledgeSource, estimate_tokens
from circuitrag.external.chain import (
    ExternalSearchChain,
    default_sources,
    generate_fallback_response,
)
from circuitrag.external.duckduckgo import DuckDuckGoSource, format_duckduckgo_response
from circuitrag.external.perplexity import PerplexitySource
from circuitrag.external.searx import SEARX_INSTANCES, SearxSource, format_searx_response
from circuitrag.external.topics import BASE_TOPICS, TopicCache, candidate_topics

__all__ = [
    "ExternalResult",
    "KnowledgeSource",
    "estimate_tokens",
    "ExternalSearchChain",
    "default_sources",
    "generate_fallback_response",
    "PerplexitySource",
    "SearxSource",
    "SEARX_INSTANCES",
    "format_searx_response",
    "DuckDuckGoSource",
    "format_duckduckgo_response",
    "TopicCache",
    "BASE_TOPICS",
    "candidate_topics",
]
