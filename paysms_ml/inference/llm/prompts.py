"""Prompt templates for the SMS extractor.

Instructions are Korean because the messages are; small models follow
same-language instructions more reliably on this data.
"""

import re
from datetime import datetime
from zoneinfo import ZoneInfo

from paysms_ml.config.keywords import CATEGORIES

_CATEGORY_LIST = ", ".join(CATEGORIES)

EXTRACT_SYSTEM_PROMPT = f"""당신은 한국 카드/은행 SMS에서 결제 정보를 추출하는 도우미입니다.
실제로 결제(승인/출금/사용)가 완료된 문자만 결제로 판단하세요.
광고, 인증번호, 결제 예정/청구 안내, 명세서, 배송 안내는 결제가 아닙니다.

다음 JSON 형식으로만 응답하세요. 다른 설명은 쓰지 마세요.
{{"isPayment": true, "amount": 12000, "storeName": "가게명", "cardName": "카드사", "dateTime": "YYYY-MM-DD HH:mm", "category": "카테고리"}}

- amount: 숫자만 (쉼표 없이)
- storeName: 결제한 가게/가맹점 이름, 알 수 없으면 "결제"
- cardName: 카드사 또는 은행 이름, 알 수 없으면 "기타"
- category: 다음 중 하나: {_CATEGORY_LIST}
- 결제가 아니면 {{"isPayment": false}} 만 반환"""

BATCH_EXTRACT_SYSTEM_PROMPT = f"""당신은 한국 카드/은행 SMS에서 결제 정보를 추출하는 도우미입니다.
번호가 매겨진 여러 SMS가 주어집니다. 각 SMS마다 하나의 JSON 객체를 만들어
JSON 배열로만 응답하세요. 다른 설명은 쓰지 마세요.

[{{"no": 1, "isPayment": true, "amount": 12000, "storeName": "가게명", "cardName": "카드사", "dateTime": "YYYY-MM-DD HH:mm", "category": "카테고리"}}]

- no: SMS 번호 (1부터 시작)
- 실제로 결제가 완료된 문자만 isPayment=true
- storeName을 알 수 없으면 "결제", cardName을 알 수 없으면 "기타"
- category: 다음 중 하나: {_CATEGORY_LIST}"""

REGEX_SYSTEM_PROMPT = """당신은 한국 결제 SMS용 정규식을 만드는 도우미입니다.
같은 형식의 SMS 샘플에 공통으로 동작하는 정규식을 만드세요.
각 정규식은 첫 번째 캡처 그룹(group1)으로 값을 추출해야 합니다.
JSON 객체 하나로만 응답하세요:
{"isPayment": true, "amountRegex": "...", "storeRegex": "...", "cardRegex": "..."}
- amountRegex: 금액 숫자 (예: "([\\\\d,]+)원")
- storeRegex: 가게명
- cardRegex: 카드사 이름, 없으면 빈 문자열
- 샘플에서 {DATE}, {TIME}, {AMOUNT}, {NUM}, {CARD_NUM}은 실제 값이 치환된 자리입니다
- 결제 문자가 아니면 {"isPayment": false}"""

REGEX_SAMPLE_MAX_LENGTH = 180

_SAMPLE_SUBSTITUTIONS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\d{1,2}[/.-]\d{1,2}"), "{DATE}"),
    (re.compile(r"\d{1,2}:\d{2}"), "{TIME}"),
    (re.compile(r"\d+\*+\d+"), "{CARD_NUM}"),
    (re.compile(r"[\d,]+원"), "{AMOUNT}원"),
    (re.compile(r"\b[\d,]{3,}\b"), "{NUM}"),
)


def format_date(timestamp_ms: int, tz: ZoneInfo, with_time: bool = False) -> str:
    if timestamp_ms <= 0:
        return ""
    fmt = "%Y-%m-%d %H:%M" if with_time else "%Y-%m-%d"
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=tz).strftime(fmt)


def build_single_prompt(body: str, timestamp_ms: int, tz: ZoneInfo) -> str:
    date = format_date(timestamp_ms, tz)
    date_info = f"\n(SMS 수신 날짜: {date})" if date else ""
    return f"다음 SMS에서 결제 정보를 추출해주세요:{date_info}\n{body}"


def build_batch_prompt(bodies: list[str], timestamps: list[int], tz: ZoneInfo) -> str:
    entries = []
    for i, body in enumerate(bodies):
        ts = timestamps[i] if i < len(timestamps) else 0
        date = format_date(ts, tz, with_time=True)
        date_info = f" (수신: {date})" if date else ""
        entries.append(f"{i + 1}번{date_info}: {body}")
    joined = "\n\n".join(entries)
    return f"다음 {len(bodies)}개 SMS에서 각각 결제 정보를 추출해주세요:\n\n{joined}"


def compact_regex_sample(body: str, max_length: int = REGEX_SAMPLE_MAX_LENGTH) -> str:
    """One-line sample with variable values replaced by placeholders."""
    compact = body.replace("\n", "\\n")
    for pattern, replacement in _SAMPLE_SUBSTITUTIONS:
        compact = pattern.sub(replacement, compact)
    return compact[:max_length]


def build_regex_prompt(samples: list[str], timestamps: list[int], tz: ZoneInfo) -> str:
    lines = []
    for i, body in enumerate(samples):
        ts = timestamps[i] if i < len(timestamps) else 0
        date = format_date(ts, tz)
        prefix = f"{date} " if date else ""
        lines.append(f"{i + 1}) {prefix}{compact_regex_sample(body)}")
    sample_text = "\n".join(lines)
    return (
        "같은 형식의 결제 SMS 샘플입니다. 공통 정규식을 JSON으로만 반환하세요.\n"
        "필드: isPayment, amountRegex, storeRegex, cardRegex\n"
        "조건: amountRegex/storeRegex는 group1 캡처 필수.\n"
        f"샘플:\n{sample_text}"
    )
