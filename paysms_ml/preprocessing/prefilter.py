"""Keyword and structural pre-filter.

Pure and local: rejects messages that are obviously not payments before any
embedding or LLM call is spent on them.
"""

import logging
import re

from paysms_ml.config.keywords import NON_PAYMENT_KEYWORDS, PAYMENT_HINT_KEYWORDS
from paysms_ml.data_models import Message

logger = logging.getLogger(__name__)

HTTP_PATTERN = re.compile(r"https?://", re.IGNORECASE)
DIGIT_RUN_PATTERN = re.compile(r"\d{2,}")
AMOUNT_WITH_WON_PATTERN = re.compile(r"[\d,]+원")

_NON_PAYMENT_LOWER = tuple(k.lower() for k in NON_PAYMENT_KEYWORDS)
_PAYMENT_HINT_LOWER = tuple(k.lower() for k in PAYMENT_HINT_KEYWORDS)


class PreFilter:
    """Rejects non-payment messages by keyword and structure."""

    def __init__(self, min_length: int = 20, max_length: int = 130):
        self.min_length = min_length
        self.max_length = max_length

    def filter(self, messages: list[Message]) -> list[Message]:
        """Keep only messages that may be payments, preserving order."""
        kept = [m for m in messages if self.accepts(m.body)]
        logger.debug(
            "Pre-filter: %d -> %d (%d rejected)",
            len(messages), len(kept), len(messages) - len(kept),
        )
        return kept

    def accepts(self, body: str) -> bool:
        return not (
            self.is_obviously_non_payment(body) or self.lacks_payment_requirements(body)
        )

    @staticmethod
    def is_obviously_non_payment(body: str) -> bool:
        lower = body.lower()
        return any(keyword in lower for keyword in _NON_PAYMENT_LOWER)

    def lacks_payment_requirements(self, body: str) -> bool:
        if len(body) < self.min_length or len(body) > self.max_length:
            return True

        if not any(ch.isdigit() for ch in body):
            return True

        # A candidate amount needs at least two consecutive digits
        if not DIGIT_RUN_PATTERN.search(body):
            return True

        # Links without a payment confirmation are ads or notices
        if HTTP_PATTERN.search(body) and "결제" not in body and "승인" not in body:
            return True

        lower = body.lower()
        has_hint = any(keyword in lower for keyword in _PAYMENT_HINT_LOWER)
        return not has_hint and not AMOUNT_WITH_WON_PATTERN.search(body)
