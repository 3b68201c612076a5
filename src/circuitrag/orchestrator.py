# src/circuitrag/orchestrator.py
"""End-to-end question answering over the trained corpus."""

from __future__ import annotations

import logging
from enum import Enum

from circuitrag.context import ContextAssembler, is_priority_document
from circuitrag.external import ExternalSearchChain
from circuitrag.generation import AnswerGenerator
from circuitrag.models import Document, QueryResponse, RetrievalCandidate
from circuitrag.prompts import (
    apology_message,
    build_external_prompt,
    is_negative_answer,
    no_corpus_message,
    nothing_found_message,
    with_behavior_instructions,
)
from circuitrag.retriever import HybridRetriever
from circuitrag.settings import Settings
from circuitrag.stores import DocumentStore

logger = logging.getLogger(__name__)

PRIORITY_SCORE = 1.0


class QueryState(str, Enum):
    """Steps a query goes through; recorded in QueryResponse.states."""

    NO_CORPUS = "NoCorpus"
    RETRIEVING = "Retrieving"
    RETRIEVAL_FALLBACK = "RetrievalFallback"
    CONTEXT_BUILT = "ContextBuilt"
    GENERATING = "Generating"
    GENERATION_FALLBACK = "GenerationFallback"
    EXTERNAL_SEARCH = "ExternalSearch"
    DONE = "Done"
    FAILED = "Failed"


def _document_candidate(
    document: Document, score: float, origin: str
) -> RetrievalCandidate:
    return RetrievalCandidate(
        id=document.id,
        document_id=document.id,
        document_name=document.name,
        content=document.content,
        score=score,
        is_priority=is_priority_document(document),
        origin=origin,  # type: ignore[arg-type]
    )


class RAGOrchestrator:
    """Answers a query from the trained corpus.

    Per query: check that a trained corpus exists, retrieve candidates, fall
    back to every trained document when retrieval finds nothing (or when
    forced extraction is requested), build the prompt and generate. Every
    path ends in an answer string; no exception escapes get_answer().

    Example:
        orchestrator = RAGOrchestrator(document_store, retriever, generator)
        answer = await orchestrator.process_query("Qual a tensão do VS1?")
    """

    def __init__(
        self,
        document_store: DocumentStore,
        retriever: HybridRetriever,
        generator: AnswerGenerator,
        assembler: ContextAssembler | None = None,
        external_search: ExternalSearchChain | None = None,
        settings: Settings | None = None,
        behavior_instructions: str | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            document_store: Source of trained documents for the corpus check
                and the exhaustive fallback
            retriever: Hybrid retriever
            generator: Answer generator (with provider fallback)
            assembler: Context assembler (defaults from settings)
            external_search: Used by answer_with_verification when the corpus
                can't answer. None disables external lookups.
            settings: Behavioral settings
            behavior_instructions: Operator text prepended to every prompt
        """
        self.settings = settings or Settings()
        self.document_store = document_store
        self.retriever = retriever
        self.generator = generator
        self.assembler = assembler or ContextAssembler(
            max_document_chars=self.settings.max_document_chars,
            max_context_chars=self.settings.max_context_chars,
        )
        self.external_search = external_search
        self.behavior_instructions = behavior_instructions

    async def process_query(
        self,
        query: str,
        language: str | None = None,
        force_extraction: bool = False,
        user_id: str | None = None,
        widget_id: str | None = None,
        model: str | None = None,
        limit: int | None = None,
    ) -> str:
        """Answer a query and return only the answer text."""
        response = await self.get_answer(
            query,
            language=language,
            force_extraction=force_extraction,
            user_id=user_id,
            widget_id=widget_id,
            model=model,
            limit=limit,
        )
        return response.answer

    async def get_answer(
        self,
        query: str,
        language: str | None = None,
        force_extraction: bool = False,
        user_id: str | None = None,
        widget_id: str | None = None,
        model: str | None = None,
        limit: int | None = None,
    ) -> QueryResponse:
        """Answer a query, recording the path taken in the response states."""
        language = language or self.settings.default_language
        states: list[str] = []
        candidates: list[RetrievalCandidate] = []

        try:
            trained = self.document_store.get_training_documents()
            if not trained:
                states.append(QueryState.NO_CORPUS.value)
                logger.info("No trained documents; skipping retrieval and generation")
                return QueryResponse(
                    query=query, answer=no_corpus_message(language), states=states
                )

            states.append(QueryState.RETRIEVING.value)
            candidates = await self._retrieve(query, limit, language)

            used_fallback = False
            if not candidates or force_extraction:
                states.append(QueryState.RETRIEVAL_FALLBACK.value)
                used_fallback = True
                candidates = self._add_all_documents(candidates, trained)
                logger.info(
                    "Retrieval fallback (%s): %d candidates",
                    "forced" if force_extraction else "no matches",
                    len(candidates),
                )
            else:
                candidates = self._add_priority_documents(candidates, trained)

            if not candidates:
                states.append(QueryState.DONE.value)
                return QueryResponse(
                    query=query,
                    answer=nothing_found_message(language),
                    states=states,
                    used_fallback=used_fallback,
                )

            candidates.sort(key=lambda c: c.score, reverse=True)
            system_prompt = with_behavior_instructions(
                self.assembler.build_context(query, candidates, language, force_extraction),
                self.behavior_instructions,
            )
            states.append(QueryState.CONTEXT_BUILT.value)

            states.append(QueryState.GENERATING.value)
            result = await self.generator.generate(
                system_prompt,
                query,
                language=language,
                model=model,
                user_id=user_id,
                widget_id=widget_id,
            )
            if result.fallback_attempted:
                states.append(QueryState.GENERATION_FALLBACK.value)
            states.append(QueryState.FAILED.value if result.failed else QueryState.DONE.value)

            return QueryResponse(
                query=query,
                answer=result.text,
                candidates=candidates,
                states=states,
                used_fallback=used_fallback,
            )
        except Exception:
            logger.exception("Unexpected error while answering %r", query)
            states.append(QueryState.FAILED.value)
            return QueryResponse(
                query=query,
                answer=apology_message(language),
                candidates=candidates,
                states=states,
            )

    async def answer_with_verification(
        self,
        query: str,
        language: str | None = None,
        user_id: str | None = None,
        widget_id: str | None = None,
        model: str | None = None,
        limit: int | None = None,
    ) -> QueryResponse:
        """Answer, then retry when the answer admits the documents lack the information.

        A negative answer is retried once with forced extraction over the
        whole corpus. If that is still negative and the query is technical,
        external sources are consulted and a second generation pass combines
        their findings with the previous answer. Failures at any of these
        steps keep the best answer obtained so far.
        """
        language = language or self.settings.default_language
        first = await self.get_answer(
            query,
            language=language,
            user_id=user_id,
            widget_id=widget_id,
            model=model,
            limit=limit,
        )
        if not self._can_improve(first) or not is_negative_answer(first.answer):
            return first

        logger.info("Answer looks negative; retrying with forced extraction")
        forced = await self.get_answer(
            query,
            language=language,
            force_extraction=True,
            user_id=user_id,
            widget_id=widget_id,
            model=model,
            limit=limit,
        )
        best = forced if self._can_improve(forced) else first
        if not is_negative_answer(best.answer):
            return best

        if self.external_search is None or not self.settings.external_search_enabled:
            return best

        try:
            external_info = await self.external_search.search(
                query, language, user_id=user_id, widget_id=widget_id
            )
            if not external_info:
                return best

            logger.info("Combining the previous answer with external findings")
            prompt = with_behavior_instructions(
                build_external_prompt(query, best.answer, external_info, language),
                self.behavior_instructions,
            )
            result = await self.generator.generate(
                prompt,
                query,
                language=language,
                model=model,
                user_id=user_id,
                widget_id=widget_id,
            )
        except Exception as e:
            logger.error("External search failed, keeping the previous answer: %s", e)
            return best

        if result.failed:
            return best

        return best.model_copy(
            update={
                "answer": result.text,
                "states": [
                    *best.states,
                    QueryState.EXTERNAL_SEARCH.value,
                    QueryState.DONE.value,
                ],
                "used_external_search": True,
            }
        )

    @staticmethod
    def _can_improve(response: QueryResponse) -> bool:
        """Only answers that went through generation are worth retrying."""
        return bool(response.states) and response.states[-1] == QueryState.DONE.value and bool(
            response.candidates
        )

    async def _retrieve(
        self, query: str, limit: int | None, language: str
    ) -> list[RetrievalCandidate]:
        try:
            results = await self.retriever.retrieve(query, limit=limit, language=language)
        except Exception as e:
            logger.error("Retrieval failed: %s", e)
            return []
        return [c for c in results if c.content and c.content.strip()]

    def _add_all_documents(
        self, candidates: list[RetrievalCandidate], trained: list[Document]
    ) -> list[RetrievalCandidate]:
        """Append every trained document with content that isn't already represented."""
        included = {c.document_id for c in candidates}
        merged = list(candidates)
        for document in trained:
            if document.id in included or not document.content.strip():
                continue
            merged.append(_document_candidate(document, self.settings.fallback_score, "fallback"))
            included.add(document.id)
        return merged

    def _add_priority_documents(
        self, candidates: list[RetrievalCandidate], trained: list[Document]
    ) -> list[RetrievalCandidate]:
        """Make sure instruction documents reach the prompt even when retrieval missed them."""
        included = {c.document_id for c in candidates}
        priority = [
            _document_candidate(document, PRIORITY_SCORE, "priority")
            for document in trained
            if document.id not in included
            and document.content.strip()
            and is_priority_document(document)
        ]
        if priority:
            logger.info("Adding %d instruction document(s) to the context", len(priority))
        return [*priority, *candidates]
