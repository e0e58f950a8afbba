"""LLM resolution of clusters.

One LLM call per cluster, on its representative. Payment clusters get a
regex triple (synthesized, template-derived, or none), are registered as a
pattern, and have every member extracted on its own text.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from paysms_ml.data_models import (
    CONFIDENCE_BY_SOURCE,
    AnalysisResult,
    ClassifiedMessage,
    ExtractionResult,
    Pattern,
    RegexTriple,
)
from paysms_ml.exceptions import StorageError
from paysms_ml.extraction import RegexExtractor, build_template_fallback_regex
from paysms_ml.inference.llm import LlmExtractor
from paysms_ml.pipeline.context import (
    Cluster,
    EmbeddedMessage,
    MainCaseContext,
    SourceGroup,
    build_contextual_input,
)
from paysms_ml.pipeline.failure_tracker import RegexFailureTracker
from paysms_ml.storage.protocols import PatternStore
from paysms_ml.telemetry import SampleCollector

logger = logging.getLogger(__name__)


class ClusterResolver:
    name = "llm"

    def __init__(
        self,
        llm: LlmExtractor,
        store: PatternStore,
        extractor: RegexExtractor,
        failure_tracker: RegexFailureTracker,
        collector: SampleCollector | None = None,
        regex_min_samples: int = 3,
        regex_sample_size: int = 3,
    ):
        self._llm = llm
        self._store = store
        self._extractor = extractor
        self._failures = failure_tracker
        self._collector = collector
        self._regex_min_samples = regex_min_samples
        self._regex_sample_size = regex_sample_size

    async def resolve_source_group(self, group: SourceGroup) -> list[ClassifiedMessage]:
        """Resolve the main cluster, then the exception clusters with its context."""
        results = await self.resolve(group.main_cluster)
        if not group.exception_clusters:
            return results

        logger.debug(
            "Sender %s: %d clusters, main %d/%d",
            group.address,
            len(group.clusters),
            group.main_cluster.size,
            group.total_count,
        )
        main = MainCaseContext.from_cluster(
            group.main_cluster, results[0].analysis.card_name if results else None
        )
        summary = group.distribution_summary()
        for cluster in group.exception_clusters:
            results.extend(await self.resolve(cluster, main, summary))
        return results

    async def resolve(
        self,
        cluster: Cluster,
        main: MainCaseContext | None = None,
        distribution_summary: str | None = None,
    ) -> list[ClassifiedMessage]:
        """Resolve one cluster; never raises."""
        try:
            return await self._resolve(cluster, main, distribution_summary)
        except Exception:
            logger.exception(
                "Cluster resolution failed (%d messages): %s",
                cluster.size,
                cluster.representative.template[:60],
            )
            return []

    async def _resolve(
        self,
        cluster: Cluster,
        main: MainCaseContext | None,
        distribution_summary: str | None,
    ) -> list[ClassifiedMessage]:
        rep = cluster.representative
        body = rep.message.body
        if main is not None and distribution_summary is not None:
            body = build_contextual_input(body, main, distribution_summary)

        judgment = await self._judge(body, rep.message.timestamp_ms)
        if judgment is None:
            logger.debug("No LLM judgment, skipping cluster: %s", rep.message.body[:30])
            return []

        if not judgment.is_payment:
            logger.debug("Non-payment (LLM): %s", rep.message.body[:30])
            await self._register(self._non_payment_pattern(rep))
            return []

        llm_analysis = AnalysisResult(
            amount=judgment.amount,
            store_name=judgment.store_name,
            category=judgment.category,
            date_time=judgment.date_time
            or self._extractor.field_parser.extract_date_time(
                rep.message.body, rep.message.timestamp_ms
            ),
            card_name=judgment.card_name,
        )

        triple, source = await self._select_regex(cluster, judgment)
        results = self._extract_members(cluster, triple, llm_analysis, source)
        if not results:
            logger.debug("Payment cluster yielded no amounts: %s", rep.message.body[:30])
            return []

        rep_analysis = next(
            (r.analysis for r in results if r.message.id == rep.message.id), llm_analysis
        )
        await self._register(self._payment_pattern(rep, rep_analysis, triple, source))
        # Regexes are uploaded only when synthesized
        await self._collect_sample(
            rep, rep_analysis, triple if source == "llm_regex" else None, source
        )

        return results

    async def _judge(self, body: str, timestamp_ms: int) -> ExtractionResult | None:
        try:
            judgments = await self._llm.extract_batch([body], [timestamp_ms])
        except Exception as e:
            logger.warning("LLM extraction failed: %s", e)
            return None
        return judgments[0] if judgments else None

    async def _select_regex(
        self,
        cluster: Cluster,
        judgment: ExtractionResult,
    ) -> tuple[RegexTriple | None, str]:
        """Best available regex triple and the source tag it implies."""
        template = cluster.representative.template

        if judgment.amount > 0 and cluster.size >= self._regex_min_samples:
            if await self._failures.should_skip(template):
                logger.debug("Regex generation in cooldown: %s", template[:60])
            else:
                triple = await self._generate_regex(cluster)
                if triple is not None and triple.is_usable:
                    await self._failures.clear_failure(template)
                    logger.debug(
                        "Regex generated: amount=%s, store=%s",
                        triple.amount_regex[:40],
                        triple.store_regex[:40],
                    )
                    return triple, "llm_regex"
                await self._failures.record_failure(template)
                logger.info("Regex generation failed, trying template fallback")

        fallback = build_template_fallback_regex(template)
        if fallback is not None:
            return fallback, "template_regex"
        return None, "llm"

    async def _generate_regex(self, cluster: Cluster) -> RegexTriple | None:
        samples = cluster.members[: self._regex_sample_size]
        try:
            return await self._llm.generate_regex_for_group(
                [s.message.body for s in samples],
                [s.message.timestamp_ms for s in samples],
            )
        except Exception as e:
            logger.warning("Regex generation raised: %s", e)
            return None

    def _extract_members(
        self,
        cluster: Cluster,
        triple: RegexTriple | None,
        llm_analysis: AnalysisResult,
        source: str,
    ) -> list[ClassifiedMessage]:
        confidence = CONFIDENCE_BY_SOURCE.get(source, CONFIDENCE_BY_SOURCE["llm"])
        rep_id = cluster.representative.message.id
        results: list[ClassifiedMessage] = []

        for member in cluster.members:
            if triple is not None:
                analysis = self._extractor.parse_with_regex(
                    body=member.message.body,
                    timestamp_ms=member.message.timestamp_ms,
                    amount_regex=triple.amount_regex,
                    store_regex=triple.store_regex,
                    card_regex=triple.card_regex,
                    fallback_amount=llm_analysis.amount,
                    fallback_store=llm_analysis.store_name,
                    fallback_card=llm_analysis.card_name,
                    fallback_category=llm_analysis.category,
                )
                if analysis is None and member.message.id == rep_id:
                    analysis = llm_analysis
            elif member.message.id == rep_id:
                analysis = llm_analysis
            else:
                analysis = self._derive_from_text(member, llm_analysis)

            if analysis is not None and analysis.amount > 0:
                results.append(
                    ClassifiedMessage(
                        message=member.message,
                        analysis=analysis,
                        resolved_by="llm",
                        confidence=confidence,
                        source=source,
                    )
                )
        return results

    def _derive_from_text(
        self,
        member: EmbeddedMessage,
        llm_analysis: AnalysisResult,
    ) -> AnalysisResult | None:
        """Fields from the member's own text; the card is the representative's.

        Members of one cluster share a format, hence an issuer.
        """
        analysis = self._extractor.parse_with_heuristics(
            body=member.message.body,
            timestamp_ms=member.message.timestamp_ms,
        )
        if analysis is None:
            return None
        update = {"card_name": llm_analysis.card_name}
        if analysis.store_name == llm_analysis.store_name:
            update["category"] = llm_analysis.category
        return analysis.model_copy(update=update)

    def _payment_pattern(
        self,
        rep: EmbeddedMessage,
        analysis: AnalysisResult,
        triple: RegexTriple | None,
        source: str,
    ) -> Pattern:
        now = datetime.now(UTC)
        return Pattern(
            template=rep.template,
            sender_address=rep.message.address,
            embedding=rep.embedding,
            is_payment=True,
            parsed_amount=analysis.amount,
            parsed_store=analysis.store_name,
            parsed_card=analysis.card_name,
            parsed_category=analysis.category,
            amount_regex=triple.amount_regex if triple else "",
            store_regex=triple.store_regex if triple else "",
            card_regex=triple.card_regex if triple else "",
            parse_source=source,
            confidence=CONFIDENCE_BY_SOURCE.get(source, CONFIDENCE_BY_SOURCE["llm"]),
            created_at=now,
            last_matched_at=now,
        )

    @staticmethod
    def _non_payment_pattern(rep: EmbeddedMessage) -> Pattern:
        now = datetime.now(UTC)
        return Pattern(
            template=rep.template,
            sender_address=rep.message.address,
            embedding=rep.embedding,
            is_payment=False,
            parse_source="llm",
            created_at=now,
            last_matched_at=now,
        )

    async def _register(self, pattern: Pattern) -> None:
        try:
            pattern_id = await self._store.insert(pattern)
        except StorageError as e:
            logger.warning("Pattern registration failed: %s", e)
            return
        logger.debug(
            "Pattern %d registered: payment=%s source=%s %s",
            pattern_id,
            pattern.is_payment,
            pattern.parse_source,
            pattern.parsed_store,
        )

    async def _collect_sample(
        self,
        rep: EmbeddedMessage,
        analysis: AnalysisResult,
        triple: RegexTriple | None,
        source: str,
    ) -> None:
        if self._collector is None:
            return
        try:
            await self._collector.collect(
                embedding=rep.embedding,
                body=rep.message.body,
                template=rep.template,
                sender_address=rep.message.address,
                card_name=analysis.card_name,
                parse_source=source,
                amount_regex=triple.amount_regex if triple else "",
                store_regex=triple.store_regex if triple else "",
                card_regex=triple.card_regex if triple else "",
            )
        except Exception as e:
            logger.warning("Telemetry collection failed: %s", e)
