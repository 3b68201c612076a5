"""Cosine similarity between embedding vectors."""

from collections.abc import Sequence

import numpy as np


def cosine_similarity(a: Sequence[float] | None, b: Sequence[float] | None) -> float:
    """Compute cosine similarity between two vectors.

    Returns 0.0 instead of raising when either vector is missing or empty,
    when the lengths differ, or when either norm is zero. Downstream
    filtering treats 0.0 as "exclude".

    Formula: cos(θ) = (a · b) / (||a|| * ||b||)
    """
    if a is None or b is None or len(a) == 0 or len(b) == 0 or len(a) != len(b):
        return 0.0

    a_arr = np.asarray(a, dtype=float)
    b_arr = np.asarray(b, dtype=float)

    norm_a, norm_b = np.linalg.norm(a_arr), np.linalg.norm(b_arr)
    if norm_a == 0 or norm_b == 0:
        return 0.0

    return float(np.dot(a_arr, b_arr) / (norm_a * norm_b))


def rank_by_similarity(
    query: Sequence[float],
    vectors: list[tuple[str, Sequence[float] | None]],
    threshold: float,
    limit: int,
) -> list[tuple[str, float]]:
    """Score every (id, vector) pair against the query and keep the best matches.

    Only scores strictly above the threshold survive. The sort is stable, so
    equal scores keep their input order.
    """
    scored = []
    for item_id, vector in vectors:
        score = cosine_similarity(query, vector)
        if score > threshold:
            scored.append((item_id, score))
    scored.sort(key=lambda pair: pair[1], reverse=True)
    return scored[:limit]
