"""Tests for SmsFieldParser."""

import pytest
from paysms_ml.preprocessing import SmsFieldParser
from paysms_ml.preprocessing.heuristics import clean_store_name, is_valid_store_name

# 2024-11-05 12:30 KST
TIMESTAMP_MS = 1_730_777_400_000


@pytest.fixture
def parser() -> SmsFieldParser:
    return SmsFieldParser(timezone="Asia/Seoul")


class TestExtractAmount:
    def test_amount_with_won(self, parser: SmsFieldParser) -> None:
        assert parser.extract_amount("[KB국민]11/05 12:30 스타벅스강남 5,000원 승인") == 5000

    def test_ignores_amount_below_minimum(self, parser: SmsFieldParser) -> None:
        assert parser.extract_amount("포인트 50원 적립 완료 감사합니다") is None

    def test_number_line_after_withdrawal(self, parser: SmsFieldParser) -> None:
        body = "[KB]11/05 12:30\n123*45**67\n이마트성수\n체크카드출금\n15,000\n잔액1,000"
        assert parser.extract_amount(body) == 15000

    def test_skips_balance_line(self, parser: SmsFieldParser) -> None:
        body = "신한 승인\n잔액 52,000\n34,000"
        assert parser.extract_amount(body) == 34000


class TestExtractStoreName:
    def test_store_after_time(self, parser: SmsFieldParser) -> None:
        assert parser.extract_store_name("[KB국민]11/05 12:30 스타벅스강남 5,000원 승인") == "스타벅스강남"

    def test_store_above_withdrawal(self, parser: SmsFieldParser) -> None:
        body = "[KB]11/05 12:30\n123*45**67\n이마트성수\n체크카드출금\n15,000\n잔액1,000"
        assert parser.extract_store_name(body) == "이마트성수"

    def test_defaults_when_nothing_plausible(self, parser: SmsFieldParser) -> None:
        assert parser.extract_store_name("승인 5,000원 12:30 ****** ******") == "결제"


class TestExtractCardName:
    def test_first_keyword_names_the_issuer(self, parser: SmsFieldParser) -> None:
        assert parser.extract_card_name("[KB국민]11/05 스타벅스 5,000원") == "KB국민"

    @pytest.mark.parametrize(
        ("body", "card"),
        [
            ("NH농협카드 승인 5,000원 이마트", "NH"),
            ("[신한체크승인] 홍길동 5,000원 이마트", "신한"),
            ("[Web발신]\nKB국민카드1234승인\n5,000원 일시불", "KB국민"),
        ],
    )
    def test_reports_issuer_name_not_keyword(
        self, parser: SmsFieldParser, body: str, card: str
    ) -> None:
        assert parser.extract_card_name(body) == card

    def test_default_card(self, parser: SmsFieldParser) -> None:
        assert parser.extract_card_name("11/05 스타벅스 5,000원 승인") == "기타"


class TestExtractDateTime:
    def test_date_and_time_from_body(self, parser: SmsFieldParser) -> None:
        result = parser.extract_date_time("12/24 09:01 이마트 5,000원", TIMESTAMP_MS)
        assert result == "2024-12-24 09:01"

    def test_korean_date(self, parser: SmsFieldParser) -> None:
        result = parser.extract_date_time("3월 7일 이마트 5,000원 18:20", TIMESTAMP_MS)
        assert result == "2024-03-07 18:20"

    def test_falls_back_to_timestamp(self, parser: SmsFieldParser) -> None:
        assert parser.extract_date_time("이마트 5,000원 승인", TIMESTAMP_MS) == "2024-11-05 12:30"

    def test_out_of_range_parts_use_timestamp(self, parser: SmsFieldParser) -> None:
        result = parser.extract_date_time("13/40 이마트 5,000원", TIMESTAMP_MS)
        assert result == "2024-11-05 12:30"

    @pytest.mark.parametrize("body", ["02/31 이마트 5,000원", "11/31 이마트 5,000원"])
    def test_impossible_date_uses_timestamp(self, parser: SmsFieldParser, body: str) -> None:
        assert parser.extract_date_time(f"{body} 09:15", TIMESTAMP_MS) == "2024-11-05 09:15"


class TestParse:
    def test_all_fields(self, parser: SmsFieldParser) -> None:
        result = parser.parse("[KB국민]11/05 12:30 스타벅스강남 5,000원 승인", TIMESTAMP_MS)
        assert result.amount == 5000
        assert result.store_name == "스타벅스강남"
        assert result.category == "카페"
        assert result.card_name == "KB국민"
        assert result.date_time == "2024-11-05 12:30"

    def test_zero_amount_when_missing(self, parser: SmsFieldParser) -> None:
        assert parser.parse("스타벅스강남 승인 완료", TIMESTAMP_MS).amount == 0


class TestStoreNameHelpers:
    def test_clean_removes_corporate_marker(self) -> None:
        assert clean_store_name("(주)이마트") == "이마트"

    def test_clean_truncates(self) -> None:
        assert len(clean_store_name("가" * 30)) == 15

    def test_invalid_store_names(self) -> None:
        assert not is_valid_store_name("12:30")
        assert not is_valid_store_name("11/05")
        assert not is_valid_store_name("홍*동")
        assert not is_valid_store_name("승인")
        assert is_valid_store_name("스타벅스강남")
