from .embedding import EmbeddingService
from .vector_search import (
    cosine_similarities,
    cosine_similarity,
    find_best_match,
    find_best_match_with_score,
)

__all__ = [
    "EmbeddingService",
    "cosine_similarities",
    "cosine_similarity",
    "find_best_match",
    "find_best_match_with_score",
]
