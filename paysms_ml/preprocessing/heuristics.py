"""Rule-based field extraction for Korean card/bank SMS.

Used whenever no extraction regex is available: for cluster members that
share a format but differ in content, and for cached patterns that were
stored without a regex. Every extractor works on the member's own text.
"""

from __future__ import annotations

import re
from datetime import datetime
from zoneinfo import ZoneInfo

from paysms_ml.config.keywords import CARD_KEYWORDS, STORE_EXCLUDE_KEYWORDS
from paysms_ml.data_models import AnalysisResult
from paysms_ml.data_models.extraction import DEFAULT_CARD_NAME, DEFAULT_STORE_NAME

from .category import infer_category

MIN_AMOUNT = 100
MAX_STORE_LENGTH = 15

PURE_NUMBER_PATTERN = re.compile(r"[\d,]+")
AMOUNT_WITH_WON_PATTERN = re.compile(r"([\d,]+)원(?![가-힣])")
AMOUNT_WON_HANGUL_PATTERN = re.compile(r".*\d+원[가-힣]+.*")

DATE_SLASH_PATTERN = re.compile(r"(\d{1,2})[/.-](\d{1,2})")
DATE_KOREAN_PATTERN = re.compile(r"(\d{1,2})월\s*(\d{1,2})일")
TIME_PATTERN = re.compile(r"(\d{1,2}):(\d{2})")

STORE_CARD_NUMBER_PATTERN = re.compile(r"[\d*]+")
STORE_DATETIME_PATTERN = re.compile(r"\d{1,2}[/.-]\d{1,2}\s+\d{1,2}:\d{2}")
STORE_BRACKET_PATTERN = re.compile(r"\[.+\]")
STORE_AMOUNT_THEN_TIME_PATTERN = re.compile(
    r"[\d,]+원\s*\((?:일시불|\d+개월)\)\s*\d{1,2}[/.-]\d{1,2}\s+\d{1,2}:\d{2}\s+(.+)$",
    re.MULTILINE,
)
STORE_TIME_BEFORE_PATTERN = re.compile(r"(\d{1,2}:\d{2})\s*(.+?)\s*[\d,]+원")
STORE_BEFORE_AMOUNT_PATTERN = re.compile(r"(.+?)\s*([\d,]+)원")
STORE_AFTER_AMOUNT_PATTERN = re.compile(r"[\d,]+원\s*(.+?)(?:승인|결제|사용|일시불|할부|\s*$)")
STORE_SPLIT_PATTERN = re.compile(r"[\s\[\]()/,\n]+")
STORE_WORD_SPLIT_PATTERN = re.compile(r"[\s\[\]()/\n]+")

CLEAN_CORP_PATTERN = re.compile(r"\(주\)|\(유\)|\(사\)|\(재\)")
CLEAN_SPECIAL_CHAR_PATTERN = re.compile(r"^[^\w가-힣]+|[^\w가-힣]+$")
CLEAN_NUMBER_WON_PATTERN = re.compile(r"^\d+원")

VALID_NUMBER_ONLY_PATTERN = re.compile(r"[\d,.:]+")
VALID_DATE_PATTERN = re.compile(r"\d{1,2}[/.-]\d{1,2}")
VALID_TIME_PATTERN = re.compile(r"\d{1,2}:\d{2}")
VALID_MASKED_NAME_PATTERN = re.compile(r"[가-힣]\*+[가-힣]?")

# Random codes, insurer codes and card-number suffixes that are not stores
INVALID_STORE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"KB\]\d{2}/\d{2}\s+\d{2}:\d{2}"),
    re.compile(r"[a-zA-Z0-9]{5,8}"),
    re.compile(r".{2,4}(화|해|츠)\d{5,6}"),
    re.compile(r".+카드\d{4}"),
    re.compile(r"\d{2}월.+"),
)

_WITHDRAWAL_MARKER = "체크카드출금"


class SmsFieldParser:
    """Extracts payment fields from an SMS body with keyword and position rules."""

    def __init__(self, timezone: str = "Asia/Seoul"):
        self._tz = ZoneInfo(timezone)

    def parse(self, body: str, timestamp_ms: int) -> AnalysisResult:
        """Extract all fields. amount is 0 when none can be found."""
        store_name = self.extract_store_name(body)
        return AnalysisResult(
            amount=self.extract_amount(body) or 0,
            store_name=store_name,
            category=infer_category(store_name, body),
            date_time=self.extract_date_time(body, timestamp_ms),
            card_name=self.extract_card_name(body),
        )

    # ---- amount ----

    def extract_amount(self, body: str) -> int | None:
        """Extract the payment amount (>= 100), or None.

        Tried in order: the number line after a KB-style withdrawal line,
        the first "N원" amount, then the first bare number line that is not
        a balance.
        """
        lines = [line.strip() for line in body.split("\n")]

        for i, line in enumerate(lines[:-1]):
            if _WITHDRAWAL_MARKER in line or line == "출금":
                amount = _parse_number_line(lines[i + 1])
                if amount is not None and amount >= MIN_AMOUNT:
                    return amount

        match = AMOUNT_WITH_WON_PATTERN.search(body)
        if match:
            amount = _to_int(match.group(1))
            if amount is not None and amount >= MIN_AMOUNT:
                return amount

        for line in lines:
            if line.startswith("잔액") or AMOUNT_WON_HANGUL_PATTERN.fullmatch(line):
                continue
            if PURE_NUMBER_PATTERN.fullmatch(line):
                stripped = line.replace(",", "")
                if len(stripped) >= 3:
                    amount = _to_int(stripped)
                    if amount is not None and amount >= MIN_AMOUNT:
                        return amount

        return None

    # ---- card ----

    def extract_card_name(self, body: str) -> str:
        lower = body.lower()
        for keyword, card_name in CARD_KEYWORDS:
            if keyword in lower:
                return card_name
        return DEFAULT_CARD_NAME

    # ---- store ----

    def extract_store_name(self, body: str) -> str:
        """Extract the store name, or "결제" when nothing plausible is found."""
        store = self._store_above_withdrawal(body)
        if store:
            return store

        for pattern, group in (
            (STORE_AMOUNT_THEN_TIME_PATTERN, 1),
            (STORE_TIME_BEFORE_PATTERN, 2),
        ):
            match = pattern.search(body)
            if match:
                candidate = clean_store_name(match.group(group))
                if is_valid_store_name(candidate):
                    return candidate

        match = STORE_BEFORE_AMOUNT_PATTERN.search(body)
        if match:
            words = [w for w in STORE_WORD_SPLIT_PATTERN.split(match.group(1)) if w.strip()]
            for word in reversed(words):
                candidate = clean_store_name(word)
                if is_valid_store_name(candidate) and not _contains_card_keyword(candidate):
                    return candidate

        match = STORE_AFTER_AMOUNT_PATTERN.search(body)
        if match:
            candidate = clean_store_name(match.group(1))
            if is_valid_store_name(candidate):
                return candidate

        for word in STORE_SPLIT_PATTERN.split(body):
            candidate = clean_store_name(word)
            if is_valid_store_name(candidate) and not _contains_card_keyword(candidate):
                return candidate

        return DEFAULT_STORE_NAME

    def _store_above_withdrawal(self, body: str) -> str | None:
        """KB-style layout: the store is the nearest real line above "출금"."""
        lines = [line.strip() for line in body.split("\n")]
        for i, line in enumerate(lines):
            if _WITHDRAWAL_MARKER not in line and line != "출금":
                continue
            for candidate_line in reversed(lines[:i]):
                if not candidate_line:
                    continue
                if "**" in candidate_line or STORE_CARD_NUMBER_PATTERN.fullmatch(candidate_line):
                    continue
                if STORE_DATETIME_PATTERN.fullmatch(candidate_line):
                    continue
                if STORE_BRACKET_PATTERN.fullmatch(candidate_line):
                    continue
                cleaned = clean_store_name(candidate_line)
                if len(cleaned) >= 2:
                    return cleaned
        return None

    # ---- date/time ----

    def extract_date_time(self, body: str, timestamp_ms: int) -> str:
        """Date and time from the body, defaulting to the receive timestamp.

        The year always comes from the timestamp. Returns "YYYY-MM-DD HH:MM".
        """
        received = datetime.fromtimestamp(timestamp_ms / 1000, tz=self._tz)
        month, day = received.month, received.day
        hour, minute = received.hour, received.minute

        date_match = DATE_SLASH_PATTERN.search(body) or DATE_KOREAN_PATTERN.search(body)
        if date_match:
            month, day = int(date_match.group(1)), int(date_match.group(2))

        time_match = TIME_PATTERN.search(body)
        if time_match:
            hour, minute = int(time_match.group(1)), int(time_match.group(2))

        try:
            datetime(received.year, month, day)
        except ValueError:
            month, day = received.month, received.day
        if not 0 <= hour <= 23:
            hour = received.hour
        if not 0 <= minute <= 59:
            minute = received.minute

        return f"{received.year:04d}-{month:02d}-{day:02d} {hour:02d}:{minute:02d}"


def clean_store_name(name: str) -> str:
    """Strip corporate markers, edge punctuation and a leading "N원"."""
    cleaned = CLEAN_CORP_PATTERN.sub("", name.strip())
    cleaned = CLEAN_SPECIAL_CHAR_PATTERN.sub("", cleaned)
    cleaned = CLEAN_NUMBER_WON_PATTERN.sub("", cleaned)
    return cleaned[:MAX_STORE_LENGTH]


def is_valid_store_name(name: str) -> bool:
    if len(name.strip()) < 2:
        return False
    if VALID_NUMBER_ONLY_PATTERN.fullmatch(name):
        return False
    if VALID_DATE_PATTERN.fullmatch(name) or VALID_TIME_PATTERN.fullmatch(name):
        return False
    if VALID_MASKED_NAME_PATTERN.fullmatch(name):
        return False
    lower = name.lower()
    if any(keyword in lower for keyword in STORE_EXCLUDE_KEYWORDS):
        return False
    return not any(p.fullmatch(name) for p in INVALID_STORE_PATTERNS)


def _contains_card_keyword(name: str) -> bool:
    lower = name.lower()
    return any(keyword in lower for keyword, _ in CARD_KEYWORDS)


def _parse_number_line(line: str) -> int | None:
    if not PURE_NUMBER_PATTERN.fullmatch(line):
        return None
    return _to_int(line)


def _to_int(raw: str) -> int | None:
    digits = raw.replace(",", "")
    return int(digits) if digits.isdigit() else None
