"""Tests for PII masking of message bodies."""

from paysms_ml.telemetry import mask_sms_body


def test_masks_digits_and_keeps_separators() -> None:
    masked = mask_sms_body("[KB국민]11/05 12:30 스타벅스 5,000원")
    assert masked == "[KB국민]**/** **:** 스타벅스 *,***원"


def test_masks_card_number_completely() -> None:
    assert mask_sms_body("우리 1234**5678 출금 15,000원") == "우리 ********** 출금 **,***원"


def test_masks_store_line_of_multiline_body() -> None:
    body = "[KB국민체크]\n11/05 12:30\n스타벅스강남\n5,000원 승인"
    assert mask_sms_body(body) == "[KB국민체크]\n**/** **:**\n******\n*,***원 승인"


def test_store_mask_is_capped() -> None:
    body = "[KB]\n11/05 12:30\n가나다라마바사아자차카타\n5,000원 승인"
    assert mask_sms_body(body).split("\n")[2] == "*" * 10


def test_no_digit_survives() -> None:
    masked = mask_sms_body("신한카드(1234)승인 홍*동 42,000원(일시불)11/05 08:15 이마트 누적1,234,567원")
    assert not any(ch.isdigit() for ch in masked)
