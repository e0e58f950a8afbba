"""Tests for PreFilter."""

from paysms_ml.data_models import Message
from paysms_ml.preprocessing import PreFilter


def _message(body: str) -> Message:
    return Message(id="m", address="15881688", body=body, timestamp_ms=0)


class TestObviousNonPayment:
    def test_rejects_advertising(self) -> None:
        body = "[광고] 스타벅스 신메뉴 출시 기념 5,000원 할인쿠폰 증정"
        assert PreFilter().is_obviously_non_payment(body)

    def test_rejects_authentication_code(self) -> None:
        body = "[Web발신] 인증번호 [123456]를 입력해주세요. 결제 확인용"
        assert not PreFilter().accepts(body)

    def test_rejects_upcoming_charge_notice(self) -> None:
        body = "[KB국민] 11/25 결제예정금액 152,000원 입니다 확인바랍니다"
        assert not PreFilter().accepts(body)

    def test_keyword_match_is_case_insensitive(self) -> None:
        assert PreFilter.is_obviously_non_payment("Your OTP is 123456 for card approval")
        assert PreFilter.is_obviously_non_payment("your otp is 123456 for card approval")


class TestStructuralRequirements:
    def test_accepts_typical_card_approval(self) -> None:
        body = "[KB국민]11/05 12:30 스타벅스강남 5,000원 승인"
        assert PreFilter().accepts(body)

    def test_rejects_too_short(self) -> None:
        assert PreFilter().lacks_payment_requirements("5,000원 승인")

    def test_rejects_too_long(self) -> None:
        body = "스타벅스강남 5,000원 승인 " * 10
        assert PreFilter(max_length=130).lacks_payment_requirements(body)

    def test_rejects_without_digit_run(self) -> None:
        assert PreFilter().lacks_payment_requirements("신한카드 승인 안내드립니다 감사합니다 고객님 1")

    def test_rejects_link_without_confirmation(self) -> None:
        body = "신한카드 고객님 12월 혜택 확인 https://shinhan.example 1234"
        assert PreFilter().lacks_payment_requirements(body)

    def test_accepts_link_with_approval(self) -> None:
        body = "신한카드 승인 12,300원 홍*동 https://shinhan.example"
        assert not PreFilter().lacks_payment_requirements(body)

    def test_rejects_without_hint_or_amount(self) -> None:
        assert PreFilter().lacks_payment_requirements("모임 장소는 강남역 11번 출구 앞입니다 19시")


class TestFilter:
    def test_preserves_order_of_kept_messages(self) -> None:
        messages = [
            _message("[KB국민]11/05 12:30 스타벅스강남 5,000원 승인"),
            _message("[광고] 이벤트 당첨을 축하드립니다 10,000원 쿠폰"),
            _message("[신한]11/06 08:10 이마트성수 32,000원 승인"),
        ]
        kept = PreFilter().filter(messages)
        assert [m.body for m in kept] == [messages[0].body, messages[2].body]
