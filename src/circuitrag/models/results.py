# src/circuitrag/models/results.py
"""Result data models for retrieval and answering."""

from typing import Literal

from pydantic import BaseModel, Field

CandidateOrigin = Literal["semantic", "keyword", "fallback", "priority"]


class RetrievalCandidate(BaseModel):
    """A chunk or whole document paired with a relevance score.

    Candidates are ephemeral: they only live for the duration of one query.
    """

    id: str
    document_id: str
    document_name: str | None = None
    content: str
    score: float
    chunk_index: int | None = None
    is_priority: bool = False
    origin: CandidateOrigin = "keyword"


class QueryResponse(BaseModel):
    """Full response to a user query, including the path the pipeline took."""

    query: str
    answer: str
    candidates: list[RetrievalCandidate] = Field(default_factory=list)
    states: list[str] = Field(default_factory=list)
    used_fallback: bool = False
    used_external_search: bool = False
