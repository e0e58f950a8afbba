"""Tests for template-derived fallback regexes."""

from paysms_ml.extraction import build_template_fallback_regex
from paysms_ml.extraction.template_fallback import (
    AMOUNT_LINE_REGEX,
    AMOUNT_WON_REGEX,
    CARD_BRACKET_REGEX,
    STORE_AFTER_TIME_REGEX,
    STORE_LINE_REGEX,
)


def test_requires_amount_and_store_placeholders() -> None:
    assert build_template_fallback_regex("[KB국민]{DATE} {TIME} 스타벅스 {AMOUNT}원 승인") is None
    assert build_template_fallback_regex("{STORE} 결제 완료") is None


def test_store_line_template() -> None:
    triple = build_template_fallback_regex("[KB국민체크]\n{DATE} {TIME}\n{STORE}\n{AMOUNT}원 승인")
    assert triple is not None
    assert triple.amount_regex == AMOUNT_WON_REGEX
    assert triple.store_regex == STORE_LINE_REGEX
    assert triple.card_regex == CARD_BRACKET_REGEX
    assert triple.is_usable


def test_amount_line_and_time_template() -> None:
    triple = build_template_fallback_regex("KB {DATE} {TIME} {STORE}\n{AMOUNT}\n잔액{BALANCE}")
    assert triple is not None
    assert triple.amount_regex == AMOUNT_LINE_REGEX
    assert triple.store_regex == STORE_AFTER_TIME_REGEX
    assert triple.card_regex == ""
