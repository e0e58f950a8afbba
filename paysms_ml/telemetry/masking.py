"""PII masking of message bodies before they leave the process."""

import re

from paysms_ml.preprocessing.template import MIN_LINES_FOR_STORE_LINE, is_likely_store_name

MAX_STORE_MASK_LENGTH = 10

CARD_NUMBER_PATTERN = re.compile(r"\d+\*+\d+")
DATE_PATTERN = re.compile(r"\d{1,2}[/.\-]\d{1,2}")
TIME_PATTERN = re.compile(r"\d{1,2}:\d{2}")
AMOUNT_PATTERN = re.compile(r"\d{1,3}(?:,\d{3})*")
DIGITS_PATTERN = re.compile(r"\d+")
DIGIT_PATTERN = re.compile(r"\d")


def _mask_digits(match: re.Match[str]) -> str:
    return DIGIT_PATTERN.sub("*", match.group(0))


def _mask_all(match: re.Match[str]) -> str:
    return "*" * len(match.group(0))


def mask_sms_body(body: str) -> str:
    """Replace the store line and every digit with "*".

    Order matters: card numbers first, then dates and times, then amounts
    (commas kept), then any digits left over.
    """
    masked = body

    lines = masked.split("\n")
    if len(lines) >= MIN_LINES_FOR_STORE_LINE:
        for i, line in enumerate(lines):
            trimmed = line.strip()
            if is_likely_store_name(trimmed):
                lines[i] = "*" * min(len(trimmed), MAX_STORE_MASK_LENGTH)
                break
        masked = "\n".join(lines)

    masked = CARD_NUMBER_PATTERN.sub(_mask_all, masked)
    masked = DATE_PATTERN.sub(_mask_digits, masked)
    masked = TIME_PATTERN.sub(_mask_digits, masked)
    masked = AMOUNT_PATTERN.sub(_mask_digits, masked)
    return DIGITS_PATTERN.sub(_mask_all, masked)
