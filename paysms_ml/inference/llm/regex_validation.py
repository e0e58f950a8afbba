"""Sample-based acceptance check for synthesized regexes."""

import logging
import re
from dataclasses import dataclass

from paysms_ml.data_models import RegexTriple
from paysms_ml.extraction.regex_extractor import extract_group1, is_valid_store_candidate

logger = logging.getLogger(__name__)

MIN_VALIDATED_AMOUNT = 100

NON_DIGIT_PATTERN = re.compile(r"\D")


@dataclass(frozen=True)
class RegexValidation:
    is_valid: bool
    reason: str
    success_ratio: float = 0.0


def _compile(pattern: str) -> re.Pattern[str] | None:
    try:
        return re.compile(pattern)
    except re.error:
        return None


def validate_regex_triple(
    triple: RegexTriple | None,
    samples: list[str],
    min_success_ratio: float,
) -> RegexValidation:
    """Accept a triple only if it compiles and extracts enough of the samples.

    A sample succeeds when the amount group yields at least 100 and the
    store group yields a plausible store name.
    """
    if triple is None:
        return RegexValidation(False, "json_parse_failed")
    if not triple.is_payment:
        return RegexValidation(False, "is_payment_false")
    if not triple.is_usable:
        return RegexValidation(False, "required_regex_blank")

    amount_pattern = _compile(triple.amount_regex)
    if amount_pattern is None:
        return RegexValidation(False, "amount_regex_compile_failed")
    store_pattern = _compile(triple.store_regex)
    if store_pattern is None:
        return RegexValidation(False, "store_regex_compile_failed")
    if triple.card_regex.strip() and _compile(triple.card_regex) is None:
        return RegexValidation(False, "card_regex_compile_failed")
    if not samples:
        return RegexValidation(False, "no_samples")

    successes = 0
    for sample in samples:
        amount_raw = extract_group1(amount_pattern, sample)
        store_raw = extract_group1(store_pattern, sample)
        digits = NON_DIGIT_PATTERN.sub("", amount_raw) if amount_raw else ""
        amount = int(digits) if digits else 0
        if amount >= MIN_VALIDATED_AMOUNT and store_raw and is_valid_store_candidate(store_raw):
            successes += 1

    ratio = successes / len(samples)
    if ratio >= min_success_ratio:
        return RegexValidation(True, "ok", ratio)
    return RegexValidation(False, f"sample_match_ratio_{ratio:.2f}", ratio)
