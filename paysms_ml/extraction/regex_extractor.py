"""Regex-based extraction of payment fields.

Each regex reads its value from capture group 1. A field whose regex does
not produce a valid value falls back to the provided fallback; extraction
only fails when no positive amount can be resolved.
"""

from __future__ import annotations

import logging
import re

from paysms_ml.config.keywords import (
    CARD_CAPTURE_INVALID_KEYWORDS,
    DEFAULT_CATEGORY,
    STORE_CAPTURE_INVALID_KEYWORDS,
    UNCLASSIFIED_CATEGORY,
)
from paysms_ml.data_models import AnalysisResult, Message, Pattern
from paysms_ml.data_models.extraction import DEFAULT_CARD_NAME, DEFAULT_STORE_NAME
from paysms_ml.exceptions import ExtractionError
from paysms_ml.preprocessing.heuristics import SmsFieldParser

logger = logging.getLogger(__name__)

MAX_CAPTURED_STORE_LENGTH = 20

NON_DIGIT_PATTERN = re.compile(r"\D")
NUMBER_ONLY_PATTERN = re.compile(r"[\d,.:/\-\s]+")
DATE_OR_TIME_PATTERN = re.compile(r"\d{1,2}[/.-]\d{1,2}(?:\s+\d{1,2}:\d{2})?|\d{1,2}:\d{2}")
CARD_MASK_PATTERN = re.compile(r"\d+\*+\d+")


def is_valid_store_candidate(value: str) -> bool:
    """Whether a regex-captured store value looks like a real store name."""
    trimmed = value.strip()
    if not 2 <= len(trimmed) <= 30:
        return False
    if "{" in trimmed:
        return False
    if NUMBER_ONLY_PATTERN.fullmatch(trimmed) or DATE_OR_TIME_PATTERN.fullmatch(trimmed):
        return False
    if CARD_MASK_PATTERN.fullmatch(trimmed):
        return False
    lower = trimmed.lower()
    return not any(keyword in lower for keyword in STORE_CAPTURE_INVALID_KEYWORDS)


def is_valid_card_candidate(value: str) -> bool:
    trimmed = value.strip()
    if not 2 <= len(trimmed) <= 20:
        return False
    if NUMBER_ONLY_PATTERN.fullmatch(trimmed):
        return False
    lower = trimmed.lower()
    return not any(keyword in lower for keyword in CARD_CAPTURE_INVALID_KEYWORDS)


def extract_group1(pattern: re.Pattern[str] | None, text: str) -> str | None:
    """First capture group of the first match, stripped; None when empty."""
    if pattern is None or pattern.groups < 1:
        return None
    match = pattern.search(text)
    if not match or match.group(1) is None:
        return None
    value = match.group(1).strip()
    return value or None


class RegexExtractor:
    """Applies an (amount, store, card) regex triple to a message body."""

    def __init__(self, field_parser: SmsFieldParser | None = None):
        self._fields = field_parser or SmsFieldParser()
        self._regex_cache: dict[str, re.Pattern[str]] = {}

    @property
    def field_parser(self) -> SmsFieldParser:
        return self._fields

    def compile(self, pattern: str) -> re.Pattern[str] | None:
        """Compile with caching. Blank or invalid patterns yield None."""
        if not pattern or not pattern.strip():
            return None
        cached = self._regex_cache.get(pattern)
        if cached is not None:
            return cached
        try:
            compiled = re.compile(pattern)
        except re.error as e:
            logger.warning("Regex compile failed: %s (%s)", pattern[:80], e)
            return None
        self._regex_cache[pattern] = compiled
        return compiled

    def parse_with_regex(
        self,
        body: str,
        timestamp_ms: int,
        amount_regex: str,
        store_regex: str,
        card_regex: str = "",
        fallback_amount: int = 0,
        fallback_store: str = "",
        fallback_card: str = "",
        fallback_category: str = "",
    ) -> AnalysisResult | None:
        """Extract fields with the given regexes.

        Returns None when neither the amount regex nor the fallback yields a
        positive amount, or when the amount/store regexes do not compile.
        """
        amount_pattern = self.compile(amount_regex)
        store_pattern = self.compile(store_regex)
        if amount_pattern is None or store_pattern is None:
            return None
        card_pattern = self.compile(card_regex)

        amount = _amount_from(extract_group1(amount_pattern, body)) or fallback_amount
        if amount <= 0:
            return None

        captured_store = extract_group1(store_pattern, body)
        if captured_store is not None:
            captured_store = captured_store[:MAX_CAPTURED_STORE_LENGTH]
            if not is_valid_store_candidate(captured_store):
                captured_store = None
        fallback_store = fallback_store.strip()[:MAX_CAPTURED_STORE_LENGTH]
        store = captured_store or fallback_store or DEFAULT_STORE_NAME

        captured_card = extract_group1(card_pattern, body)
        if captured_card is not None and not is_valid_card_candidate(captured_card):
            captured_card = None
        card = captured_card or fallback_card or DEFAULT_CARD_NAME

        return AnalysisResult(
            amount=amount,
            store_name=store,
            category=fallback_category or DEFAULT_CATEGORY,
            date_time=self._fields.extract_date_time(body, timestamp_ms),
            card_name=card,
        )

    def parse_with_pattern(self, message: Message, pattern: Pattern) -> AnalysisResult | None:
        """Extract fields for a message that matched a learned pattern.

        Uses the pattern's regex triple when present. Otherwise (or when the
        regex yields nothing) fields are derived from the message's own text
        with the pattern's cached values as per-field fallbacks.
        """
        if pattern.has_regex:
            result = self.parse_with_regex(
                body=message.body,
                timestamp_ms=message.timestamp_ms,
                amount_regex=pattern.amount_regex,
                store_regex=pattern.store_regex,
                card_regex=pattern.card_regex,
                fallback_amount=pattern.parsed_amount,
                fallback_store=pattern.parsed_store,
                fallback_card=pattern.parsed_card,
                fallback_category=pattern.parsed_category,
            )
            if result is not None:
                return result

        return self.parse_with_heuristics(
            body=message.body,
            timestamp_ms=message.timestamp_ms,
            fallback_amount=pattern.parsed_amount,
            fallback_store=pattern.parsed_store,
            fallback_card=pattern.parsed_card,
            fallback_category=pattern.parsed_category,
        )

    def parse_with_heuristics(
        self,
        body: str,
        timestamp_ms: int,
        fallback_amount: int = 0,
        fallback_store: str = "",
        fallback_card: str = "",
        fallback_category: str = "",
    ) -> AnalysisResult | None:
        """Derive fields from the body with keyword rules, falling back per field."""
        fields = self._fields.parse(body, timestamp_ms)

        amount = fields.amount or fallback_amount
        if amount <= 0:
            return None

        store = fields.store_name
        if store == DEFAULT_STORE_NAME and fallback_store:
            store = fallback_store

        card = fields.card_name
        if card == DEFAULT_CARD_NAME and fallback_card:
            card = fallback_card

        category = fields.category
        if fallback_category and (category == UNCLASSIFIED_CATEGORY or store == fallback_store):
            category = fallback_category
        elif category == UNCLASSIFIED_CATEGORY:
            category = DEFAULT_CATEGORY

        return AnalysisResult(
            amount=amount,
            store_name=store,
            category=category,
            date_time=fields.date_time,
            card_name=card,
        )

    def require(self, message: Message, pattern: Pattern) -> AnalysisResult:
        """Like parse_with_pattern, but raise ExtractionError instead of returning None."""
        result = self.parse_with_pattern(message, pattern)
        if result is None:
            msg = "No positive amount could be extracted"
            raise ExtractionError(msg, details={"message_id": message.id, "pattern_id": pattern.id})
        return result


def _amount_from(raw: str | None) -> int:
    if raw is None:
        return 0
    digits = NON_DIGIT_PATTERN.sub("", raw)
    return int(digits) if digits else 0
