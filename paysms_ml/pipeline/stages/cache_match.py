from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime

from paysms_ml.data_models import ClassifiedMessage, Pattern
from paysms_ml.exceptions import StorageError
from paysms_ml.extraction import RegexExtractor
from paysms_ml.inference.vector_search import find_best_match_with_score
from paysms_ml.pipeline.context import EmbeddedMessage
from paysms_ml.similarity import SmsPatternPolicy
from paysms_ml.storage.protocols import PatternStore

logger = logging.getLogger(__name__)


@dataclass
class CacheMatchResult:
    accepted: list[ClassifiedMessage] = field(default_factory=list)
    unmatched: list[EmbeddedMessage] = field(default_factory=list)
    rejected: int = 0


class CacheMatcher:
    """Resolves messages against learned patterns without any LLM call.

    Non-payment patterns are checked first with the stricter non-payment
    threshold; a hit rejects the message. Otherwise the best payment
    pattern at or above the confirm threshold extracts the fields.
    """

    name = "cache"

    def __init__(
        self,
        store: PatternStore,
        policy: SmsPatternPolicy,
        extractor: RegexExtractor,
    ):
        self._store = store
        self._policy = policy
        self._extractor = extractor

    async def load_patterns(self) -> tuple[list[Pattern], list[Pattern]]:
        """Payment and non-payment patterns; empty on storage failure."""
        try:
            payment = await self._store.get_all_payment_patterns()
            non_payment = await self._store.get_all_non_payment_patterns()
        except StorageError as e:
            logger.warning("Pattern cache unavailable, treating as empty: %s", e)
            return [], []
        return payment, non_payment

    async def process(self, items: list[EmbeddedMessage]) -> CacheMatchResult:
        result = CacheMatchResult()
        if not items:
            return result

        payment_patterns, non_payment_patterns = await self.load_patterns()
        logger.debug(
            "Loaded %d payment / %d non-payment patterns",
            len(payment_patterns),
            len(non_payment_patterns),
        )

        for item in items:
            outcome = await self.match_one(item, payment_patterns, non_payment_patterns)
            if outcome is None:
                result.unmatched.append(item)
            elif outcome is False:
                result.rejected += 1
            else:
                result.accepted.append(outcome)

        logger.info(
            "Cache tier: %d/%d matched, %d rejected as non-payment",
            len(result.accepted),
            len(items),
            result.rejected,
        )
        return result

    async def match_one(
        self,
        item: EmbeddedMessage,
        payment_patterns: list[Pattern],
        non_payment_patterns: list[Pattern],
    ) -> ClassifiedMessage | bool | None:
        """ClassifiedMessage on a payment hit, False on a non-payment hit, None on a miss."""
        non_payment = find_best_match_with_score(
            item.embedding, non_payment_patterns, self._policy.non_payment_threshold
        )
        if non_payment is not None:
            pattern, score = non_payment
            logger.debug("Non-payment cache hit (%.3f): %s", score, item.message.body[:30])
            await self._increment(pattern)
            return False

        payment = find_best_match_with_score(
            item.embedding, payment_patterns, self._policy.profile.confirm
        )
        if payment is None:
            return None
        pattern, score = payment

        try:
            analysis = self._extractor.parse_with_pattern(item.message, pattern)
        except Exception as e:
            logger.warning("Cache extraction failed for %s: %s", item.message.id, e)
            return None
        if analysis is None:
            logger.debug("Cache hit (%.3f) but extraction failed: %s", score, item.message.body[:30])
            return None

        await self._increment(pattern)
        return ClassifiedMessage(
            message=item.message,
            analysis=analysis,
            resolved_by="cache",
            confidence=score,
            source=pattern.parse_source,
        )

    async def _increment(self, pattern: Pattern) -> None:
        if pattern.id is None:
            return
        try:
            await self._store.increment_match_count(pattern.id, datetime.now(UTC))
        except StorageError as e:
            logger.warning("Failed to update match count of pattern %s: %s", pattern.id, e)
