"""Linear-scan cosine similarity search.

Pattern sets stay in the low thousands, so a brute-force scan over a numpy
matrix is fast enough and needs no approximate index.
"""

from collections.abc import Sequence

import numpy as np
from numpy.typing import NDArray

from paysms_ml.data_models import Pattern


def cosine_similarity(a: NDArray[np.float32], b: NDArray[np.float32]) -> float:
    """Cosine similarity of two vectors.

    Returns 0.0 when the vectors differ in length, are empty, or either has
    zero magnitude.
    """
    if a.shape != b.shape or a.size == 0:
        return 0.0

    a64 = a.astype(np.float64)
    b64 = b.astype(np.float64)
    denominator = float(np.linalg.norm(a64) * np.linalg.norm(b64))
    if denominator == 0.0:
        return 0.0

    return float(np.dot(a64, b64) / denominator)


def cosine_similarities(
    query: NDArray[np.float32],
    matrix: NDArray[np.float32],
) -> NDArray[np.float64]:
    """Cosine similarity between a query and every row of a matrix.

    Rows with zero magnitude (or a zero query) score 0.0.
    """
    if matrix.size == 0 or query.size == 0 or matrix.shape[1] != query.shape[0]:
        return np.zeros(len(matrix), dtype=np.float64)

    q = query.astype(np.float64)
    m = matrix.astype(np.float64)
    denominators = np.linalg.norm(m, axis=1) * np.linalg.norm(q)
    dots = m @ q

    scores = np.zeros(len(m), dtype=np.float64)
    nonzero = denominators > 0
    scores[nonzero] = dots[nonzero] / denominators[nonzero]
    return scores


def find_best_match_with_score(
    query: NDArray[np.float32],
    candidates: Sequence[Pattern],
    min_similarity: float,
) -> tuple[Pattern, float] | None:
    """Return the most similar candidate and its score, if it clears the bar.

    Ties go to the first candidate in order. Candidates whose embedding
    dimension differs from the query never match.
    """
    best: Pattern | None = None
    best_score = -1.0

    indices = [i for i, c in enumerate(candidates) if c.embedding.shape == query.shape]
    if not indices:
        return None

    matrix = np.vstack([candidates[i].embedding for i in indices])
    scores = cosine_similarities(query, matrix)

    for idx, score in zip(indices, scores):
        if score > best_score:
            best_score = float(score)
            best = candidates[idx]

    if best is None or best_score < min_similarity:
        return None
    return best, best_score


def find_best_match(
    query: NDArray[np.float32],
    candidates: Sequence[Pattern],
    min_similarity: float,
) -> Pattern | None:
    """Return the most similar candidate if its similarity >= min_similarity."""
    match = find_best_match_with_score(query, candidates, min_similarity)
    return match[0] if match else None
