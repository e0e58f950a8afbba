"""Batch classification pipeline.

Stages, each a hard synchronization point:
1. Filter: keyword and structural pre-filter (no external calls)
2. Embed: templateize and embed in bounded parallel chunks
3. Cache: match against learned payment / non-payment patterns
4. Group: cluster the unmatched by sender, then by similarity
5. LLM: resolve one representative per cluster, synthesize regexes,
   extract every member and register patterns

Usage:
    pipeline = BatchPipeline.from_infrastructure(infra, store)
    results = await pipeline.process_batch(messages)
"""

from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from paysms_ml.data_models import ClassifiedMessage, Message
from paysms_ml.extraction import RegexExtractor
from paysms_ml.preprocessing import PreFilter, SmsFieldParser
from paysms_ml.similarity import SmsPatternPolicy

from .context import ProgressCallback, SourceGroup
from .failure_tracker import RegexFailureTracker
from .stages import (
    CacheMatcher,
    ClusterResolver,
    EmbedStage,
    build_source_groups,
    group_by_address_then_similarity,
)

if TYPE_CHECKING:
    from paysms_ml.config.settings import Settings
    from paysms_ml.inference import EmbeddingService
    from paysms_ml.inference.llm import LlmExtractor
    from paysms_ml.shared import SharedInfrastructure
    from paysms_ml.storage.protocols import PatternStore
    from paysms_ml.telemetry import SampleCollector

logger = logging.getLogger(__name__)


class BatchPipeline:
    """Classifies a batch of messages, spending LLM calls only on new formats."""

    def __init__(
        self,
        store: PatternStore,
        embedding_service: EmbeddingService,
        settings: Settings,
        llm: LlmExtractor | None = None,
        collector: SampleCollector | None = None,
        failure_tracker: RegexFailureTracker | None = None,
    ):
        self._store = store
        self._settings = settings
        self._llm = llm

        field_parser = SmsFieldParser(timezone=settings.timezone)
        extractor = RegexExtractor(field_parser)
        policy = SmsPatternPolicy.from_settings(settings)

        self._prefilter = PreFilter(settings.min_body_length, settings.max_body_length)
        self._embed = EmbedStage(embedding_service)
        self._cache = CacheMatcher(store, policy, extractor)
        self._policy = policy
        self._resolver = (
            ClusterResolver(
                llm=llm,
                store=store,
                extractor=extractor,
                failure_tracker=failure_tracker
                or RegexFailureTracker(
                    threshold=settings.regex_failure_threshold,
                    cooldown_seconds=settings.regex_failure_cooldown_seconds,
                ),
                collector=collector,
                regex_min_samples=settings.regex_min_samples,
                regex_sample_size=settings.regex_sample_size,
            )
            if llm is not None
            else None
        )

    @classmethod
    def from_infrastructure(
        cls,
        infra: SharedInfrastructure,
        store: PatternStore,
    ) -> BatchPipeline:
        return cls(
            store=store,
            embedding_service=infra.embedding_service,
            settings=infra.settings,
            llm=infra.llm,
            collector=infra.collector,
            failure_tracker=infra.failure_tracker,
        )

    async def process_batch(
        self,
        messages: list[Message],
        max_count: int | None = None,
        progress_callback: ProgressCallback | None = None,
    ) -> list[ClassifiedMessage]:
        """Classify messages; returns the accepted payments.

        Rejected, unresolvable and failed messages are simply absent from
        the result. Never raises for per-message or per-cluster failures.
        """
        batch = messages if max_count is None else messages[: max(0, max_count)]
        logger.info("Starting batch classification: %d messages", len(batch))

        def progress(step: str, current: int, total: int) -> None:
            if progress_callback is not None:
                progress_callback(step, current, total)

        kept = self._prefilter.filter(batch)
        progress("filter", len(kept), len(batch))
        if not kept:
            return []

        embedded = await self._embed.process(kept)
        progress("embed", len(embedded), len(kept))

        cache_result = await self._cache.process(embedded)
        progress("cache", len(cache_result.accepted), len(embedded))
        results = list(cache_result.accepted)

        unmatched = cache_result.unmatched
        if not unmatched:
            logger.info("Batch complete: %d/%d accepted (all by cache)", len(results), len(batch))
            return results
        if self._resolver is None:
            logger.info("LLM disabled: %d unmatched messages left unresolved", len(unmatched))
            return results

        clusters = await group_by_address_then_similarity(
            unmatched,
            group_threshold=self._policy.profile.group,
            max_small_size=self._settings.small_group_max_size,
            merge_min_similarity=self._settings.merge_min_similarity,
        )
        source_groups = build_source_groups(clusters)
        progress("group", len(clusters), len(unmatched))
        logger.info(
            "Group tier: %d messages -> %d clusters from %d senders",
            len(unmatched),
            len(clusters),
            len(source_groups),
        )

        results.extend(await self._resolve_source_groups(self._resolver, source_groups, progress))

        logger.info("Batch complete: %d/%d accepted", len(results), len(batch))
        return results

    async def _resolve_source_groups(
        self,
        resolver: ClusterResolver,
        source_groups: list[SourceGroup],
        progress: ProgressCallback,
    ) -> list[ClassifiedMessage]:
        semaphore = asyncio.Semaphore(max(1, self._settings.llm_concurrency))
        batch_size = max(1, self._settings.llm_batch_size)
        total = len(source_groups)
        done = 0
        results: list[ClassifiedMessage] = []

        async def run(group: SourceGroup) -> list[ClassifiedMessage]:
            nonlocal done
            async with semaphore:
                try:
                    return await resolver.resolve_source_group(group)
                finally:
                    done += 1
                    progress("llm", done, total)

        for start in range(0, total, batch_size):
            batch = source_groups[start : start + batch_size]
            batch_results = await asyncio.gather(*(run(g) for g in batch))
            for group_results in batch_results:
                results.extend(group_results)

        n_clustered = sum(g.total_count for g in source_groups)
        logger.info("LLM tier: %d/%d accepted", len(results), n_clustered)
        return results

    async def cleanup_stale_patterns(self, now: datetime | None = None) -> int:
        """Delete patterns rarely matched and not matched within the retention window."""
        cutoff = (now or datetime.now(UTC)) - timedelta(days=self._settings.stale_pattern_days)
        return await self._store.delete_stale(self._settings.stale_pattern_max_matches, cutoff)
