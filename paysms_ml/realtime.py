"""Low-latency classification of a single incoming message.

Runs the pre-filter and the cache tier only, then falls back to rule-based
extraction. Never clusters and never calls the LLM; messages it cannot
resolve are left for the next batch run.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from paysms_ml.config.keywords import DEFAULT_CATEGORY, UNCLASSIFIED_CATEGORY
from paysms_ml.data_models import ClassifiedMessage, Message
from paysms_ml.data_models.extraction import DEFAULT_STORE_NAME
from paysms_ml.extraction import RegexExtractor
from paysms_ml.pipeline.context import EmbeddedMessage
from paysms_ml.pipeline.stages import CacheMatcher
from paysms_ml.preprocessing import PreFilter, SmsFieldParser
from paysms_ml.similarity import SmsPatternPolicy

if TYPE_CHECKING:
    from paysms_ml.config.settings import Settings
    from paysms_ml.inference import EmbeddingService
    from paysms_ml.shared import SharedInfrastructure
    from paysms_ml.storage.protocols import PatternStore

logger = logging.getLogger(__name__)

RULES_CONFIDENCE = 0.7


class RealtimeClassifier:
    def __init__(
        self,
        store: PatternStore,
        embedding_service: EmbeddingService,
        settings: Settings,
    ):
        self._embedding = embedding_service
        self._fields = SmsFieldParser(timezone=settings.timezone)
        self._prefilter = PreFilter(settings.min_body_length, settings.max_body_length)
        self._cache = CacheMatcher(
            store, SmsPatternPolicy.from_settings(settings), RegexExtractor(self._fields)
        )

    @classmethod
    def from_infrastructure(
        cls,
        infra: SharedInfrastructure,
        store: PatternStore,
    ) -> RealtimeClassifier:
        return cls(store, infra.embedding_service, infra.settings)

    async def classify(self, message: Message) -> ClassifiedMessage | None:
        """Accepted payment, or None when rejected or not resolvable without the LLM."""
        if not self._prefilter.accepts(message.body):
            logger.debug("Realtime: filtered %s", message.id)
            return None

        template = self._embedding.templateize(message.body)
        embedding = await self._embedding.embed(template)
        if embedding is not None:
            payment, non_payment = await self._cache.load_patterns()
            outcome = await self._cache.match_one(
                EmbeddedMessage(message, template, embedding), payment, non_payment
            )
            if outcome is False:
                logger.debug("Realtime: non-payment pattern hit for %s", message.id)
                return None
            if isinstance(outcome, ClassifiedMessage):
                return outcome
        else:
            logger.warning("Realtime: embedding failed for %s, using rules only", message.id)

        return self._classify_with_rules(message)

    def _classify_with_rules(self, message: Message) -> ClassifiedMessage | None:
        analysis = self._fields.parse(message.body, message.timestamp_ms)
        # A default store name means the rules did not really understand the format
        if analysis.amount <= 0 or analysis.store_name == DEFAULT_STORE_NAME:
            return None
        if analysis.category == UNCLASSIFIED_CATEGORY:
            analysis = analysis.model_copy(update={"category": DEFAULT_CATEGORY})
        return ClassifiedMessage(
            message=message,
            analysis=analysis,
            resolved_by="rules",
            confidence=RULES_CONFIDENCE,
            source="rules",
        )
