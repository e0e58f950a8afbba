"""Batch pipeline stages."""

from .analysis import ClusterResolver
from .cache_match import CacheMatcher, CacheMatchResult
from .embed import EmbedStage
from .grouping import (
    build_source_groups,
    greedy_cluster,
    group_by_address_then_similarity,
    merge_small_clusters,
)

__all__ = [
    "CacheMatchResult",
    "CacheMatcher",
    "ClusterResolver",
    "EmbedStage",
    "build_source_groups",
    "greedy_cluster",
    "group_by_address_then_similarity",
    "merge_small_clusters",
]
