"""Sender-then-similarity clustering of unmatched messages.

Messages from one sender almost always share an institutional format, so
clustering runs within each normalized sender address. Within a sender,
greedy clustering forms groups around the first unassigned message; small
groups are then folded into the sender's largest group when their
representatives are at least loosely similar.
"""

from __future__ import annotations

import asyncio
import logging

import numpy as np

from paysms_ml.inference.vector_search import cosine_similarities, cosine_similarity
from paysms_ml.pipeline.context import Cluster, EmbeddedMessage, SourceGroup
from paysms_ml.preprocessing import normalize_address

logger = logging.getLogger(__name__)

YIELD_EVERY = 50


async def greedy_cluster(items: list[EmbeddedMessage], threshold: float) -> list[Cluster]:
    """Cluster items around representatives, largest cluster first.

    Every member of a returned cluster has similarity >= threshold to the
    cluster's representative.
    """
    if not items:
        return []

    matrix = np.vstack([item.embedding for item in items])
    assigned = np.zeros(len(items), dtype=bool)
    clusters: list[Cluster] = []

    for i, item in enumerate(items):
        if assigned[i]:
            continue
        if i % YIELD_EVERY == 0:
            await asyncio.sleep(0)

        assigned[i] = True
        cluster = Cluster(representative=item, members=[item])

        scores = cosine_similarities(item.embedding, matrix[i + 1 :])
        for offset in np.flatnonzero(scores >= threshold):
            j = i + 1 + int(offset)
            if not assigned[j]:
                assigned[j] = True
                cluster.members.append(items[j])

        clusters.append(cluster)

    return sorted(clusters, key=lambda c: c.size, reverse=True)


def merge_small_clusters(
    clusters: list[Cluster],
    max_small_size: int,
    min_similarity: float,
) -> list[Cluster]:
    """Fold clusters of at most max_small_size members into the largest one.

    Only the two representatives are compared, so merged members need not
    be similar to the absorbing representative.
    """
    if len(clusters) <= 1:
        return clusters

    ordered = sorted(clusters, key=lambda c: c.size, reverse=True)
    largest = ordered[0]
    kept = [largest]
    merged = 0

    for cluster in ordered[1:]:
        if cluster.size <= max_small_size:
            similarity = cosine_similarity(
                largest.representative.embedding, cluster.representative.embedding
            )
            if similarity >= min_similarity:
                largest.members.extend(cluster.members)
                merged += cluster.size
                continue
        kept.append(cluster)

    if merged:
        logger.debug(
            "Merged small clusters: %d -> %d clusters (%d messages absorbed)",
            len(clusters),
            len(kept),
            merged,
        )
    return kept


async def group_by_address_then_similarity(
    items: list[EmbeddedMessage],
    group_threshold: float,
    max_small_size: int,
    merge_min_similarity: float,
) -> list[Cluster]:
    by_address: dict[str, list[EmbeddedMessage]] = {}
    for item in items:
        by_address.setdefault(normalize_address(item.message.address), []).append(item)

    logger.debug("Sender partition: %d messages -> %d senders", len(items), len(by_address))

    clusters: list[Cluster] = []
    for partition in by_address.values():
        if len(partition) == 1:
            clusters.append(Cluster(representative=partition[0], members=[partition[0]]))
            continue
        sub_clusters = await greedy_cluster(partition, group_threshold)
        clusters.extend(merge_small_clusters(sub_clusters, max_small_size, merge_min_similarity))

    return sorted(clusters, key=lambda c: c.size, reverse=True)


def build_source_groups(clusters: list[Cluster]) -> list[SourceGroup]:
    """Regroup clusters per sender; senders with the most messages first."""
    by_address: dict[str, list[Cluster]] = {}
    for cluster in clusters:
        address = normalize_address(cluster.representative.message.address)
        by_address.setdefault(address, []).append(cluster)

    groups = [
        SourceGroup(address=address, clusters=sorted(subs, key=lambda c: c.size, reverse=True))
        for address, subs in by_address.items()
    ]
    return sorted(groups, key=lambda g: g.total_count, reverse=True)
