# src/circuitrag/retriever.py
"""Hybrid retrieval: keyword match plus embedding similarity."""

from __future__ import annotations

import logging

from circuitrag.context import is_priority_document
from circuitrag.embedder import Embedder
from circuitrag.keywords import extract_keywords
from circuitrag.models import Chunk, Document, RetrievalCandidate
from circuitrag.settings import Settings
from circuitrag.similarity import rank_by_similarity
from circuitrag.stores import ChunkStore, DocumentStore, VectorIndex

logger = logging.getLogger(__name__)


class HybridRetriever:
    """Combines keyword search and semantic search into one ranked list.

    The semantic branch asks for roughly 60% of the limit so keyword matches
    still get room. Semantic matches are merged first, keyword matches whose
    chunk is not already present are appended, and the result is sorted by
    descending score. The sort is stable, so ties keep merge order and the
    same store state always yields the same ordering.

    Failures in either branch are logged and treated as "no evidence"; the
    retriever itself never raises for collaborator errors.
    """

    def __init__(
        self,
        chunk_store: ChunkStore,
        embedder: Embedder | None = None,
        document_store: DocumentStore | None = None,
        vector_index: VectorIndex | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the retriever.

        Args:
            chunk_store: Source of chunks for keyword search and local scoring
            embedder: Query embedder. Without one, retrieval is keyword-only.
            document_store: Used to resolve document names and roles
            vector_index: Optional pre-ranked vector search. Without one,
                every stored chunk embedding is scored in-process.
            settings: Limits and thresholds (defaults to Settings())
        """
        self.chunk_store = chunk_store
        self.embedder = embedder
        self.document_store = document_store
        self.vector_index = vector_index
        self.settings = settings or Settings()

    async def retrieve(
        self,
        query: str,
        limit: int | None = None,
        language: str | None = None,
    ) -> list[RetrievalCandidate]:
        """Return up to `limit` candidates for a query, best first."""
        limit = self.settings.default_limit if limit is None else limit
        language = language or self.settings.default_language
        if limit <= 0 or not query.strip():
            return []

        keyword_results = self._keyword_search(query, language)
        semantic_results = await self._semantic_search(query, language, limit)

        merged = list(semantic_results)
        seen = {c.id for c in merged}
        for candidate in keyword_results:
            if candidate.id not in seen:
                merged.append(candidate)
                seen.add(candidate.id)

        merged.sort(key=lambda c: c.score, reverse=True)
        results = merged[:limit]

        logger.debug(
            "Hybrid search for %r: %d semantic, %d keyword, %d returned",
            query,
            len(semantic_results),
            len(keyword_results),
            len(results),
        )
        return self._annotate(results)

    def _keyword_search(self, query: str, language: str) -> list[RetrievalCandidate]:
        keywords = extract_keywords(query, language)
        if not keywords:
            return []
        try:
            matches = self.chunk_store.search_document_chunks_by_keywords(keywords, language)
        except Exception as e:
            logger.warning("Keyword search failed: %s", e)
            return []

        return [
            self._to_candidate(chunk, score or self.settings.default_keyword_score, "keyword")
            for chunk, score in matches
        ]

    async def _semantic_search(
        self, query: str, language: str, limit: int
    ) -> list[RetrievalCandidate]:
        if self.embedder is None:
            return []

        query_embedding = await self.embedder.aembed(query)
        if not query_embedding:
            logger.info("Query embedding unavailable; falling back to keyword-only search")
            return []

        count = self.settings.semantic_limit(limit)
        threshold = self.settings.similarity_threshold
        try:
            if self.vector_index is not None:
                matches = self.vector_index.match(query_embedding, threshold, count, language)
                chunks = {c.id: c for c in self.chunk_store.get_many([m[0] for m in matches])}
                return [
                    self._to_candidate(chunks[chunk_id], score, "semantic")
                    for chunk_id, score in matches
                    if chunk_id in chunks
                ]

            stored = self.chunk_store.get_document_chunks_by_language(language)
            by_id = {c.id: c for c in stored}
            ranked = rank_by_similarity(
                query_embedding,
                [(c.id, c.embedding) for c in stored if c.embedding],
                threshold,
                count,
            )
            return [self._to_candidate(by_id[cid], score, "semantic") for cid, score in ranked]
        except Exception as e:
            logger.warning("Semantic search failed, using keyword results only: %s", e)
            return []

    @staticmethod
    def _to_candidate(chunk: Chunk, score: float, origin: str) -> RetrievalCandidate:
        return RetrievalCandidate(
            id=chunk.id,
            document_id=chunk.document_id,
            document_name=chunk.metadata.get("document_name"),
            content=chunk.content,
            score=score,
            chunk_index=chunk.chunk_index,
            origin=origin,  # type: ignore[arg-type]
        )

    def _annotate(self, candidates: list[RetrievalCandidate]) -> list[RetrievalCandidate]:
        """Fill in document names and priority flags from the document store."""
        if self.document_store is None or not candidates:
            return candidates

        documents: dict[str, Document | None] = {}
        annotated = []
        for candidate in candidates:
            if candidate.document_id not in documents:
                try:
                    documents[candidate.document_id] = self.document_store.get(
                        candidate.document_id
                    )
                except Exception as e:
                    logger.warning("Could not load document %s: %s", candidate.document_id, e)
                    documents[candidate.document_id] = None
            document = documents[candidate.document_id]
            if document is None:
                annotated.append(candidate)
                continue
            annotated.append(
                candidate.model_copy(
                    update={
                        "document_name": document.name,
                        "is_priority": is_priority_document(document),
                    }
                )
            )
        return annotated
