"""Tests for OllamaSmsExtractor against a mocked Ollama API."""

import json
from collections.abc import Callable

import httpx
import pytest
from paysms_ml.inference.llm import OllamaSmsExtractor
from paysms_ml.inference.llm.prompts import BATCH_EXTRACT_SYSTEM_PROMPT, REGEX_SYSTEM_PROMPT

from tests.fakes import KB_AMOUNT_REGEX, KB_STORE_REGEX

BODY = "[KB국민]11/05 12:30 스타벅스강남 5,000원 승인"
TIMESTAMP_MS = 1_730_777_400_000

SINGLE_RESPONSE = json.dumps(
    {
        "isPayment": True,
        "amount": "5,000",
        "storeName": "스타벅스강남",
        "cardName": "KB국민",
        "category": "커피",
        "dateTime": "2024-11-05 12:30",
    },
    ensure_ascii=False,
)


def _extractor(handler: Callable[[httpx.Request], httpx.Response]) -> OllamaSmsExtractor:
    return OllamaSmsExtractor(model="qwen2.5:3b", transport=httpx.MockTransport(handler))


def _generate_response(text: str) -> httpx.Response:
    return httpx.Response(200, json={"model": "qwen2.5:3b", "response": text, "done": True})


class TestExtract:
    async def test_parses_fields_and_normalizes_category(self) -> None:
        payloads: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            payloads.append(json.loads(request.content))
            return _generate_response(f"```json\n{SINGLE_RESPONSE}\n```")

        result = await _extractor(handler).extract(BODY, TIMESTAMP_MS)

        assert result is not None
        assert result.is_payment
        assert result.amount == 5000
        assert result.category == "카페"
        assert payloads[0]["stream"] is False
        assert "(SMS 수신 날짜: 2024-11-05)" in payloads[0]["prompt"]

    async def test_non_payment(self) -> None:
        result = await _extractor(lambda r: _generate_response('{"isPayment": false}')).extract(BODY)
        assert result is not None
        assert not result.is_payment

    @pytest.mark.parametrize(("flag", "expected"), [("false", False), ("True", True), (1, False)])
    async def test_payment_flag_must_be_true(self, flag: object, expected: bool) -> None:
        response = json.dumps({"isPayment": flag, "amount": "5,000"})

        result = await _extractor(lambda r: _generate_response(response)).extract(BODY)

        assert result is not None
        assert result.is_payment is expected

    async def test_unparseable_response(self) -> None:
        assert await _extractor(lambda r: _generate_response("잘 모르겠습니다")).extract(BODY) is None

    async def test_connect_error_returns_none(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        assert await _extractor(handler).extract(BODY) is None

    async def test_http_error_returns_none(self) -> None:
        assert await _extractor(lambda r: httpx.Response(500)).extract(BODY) is None


class TestExtractBatch:
    async def test_numbered_batch(self) -> None:
        batch = [
            {"no": 2, "isPayment": False},
            {"no": 1, "isPayment": True, "amount": 5000, "storeName": "스타벅스강남"},
        ]
        calls: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(json.loads(request.content))
            return _generate_response(json.dumps(batch, ensure_ascii=False))

        results = await _extractor(handler).extract_batch(
            [BODY, "[광고] 이벤트"], [TIMESTAMP_MS, TIMESTAMP_MS]
        )

        assert len(calls) == 1
        assert calls[0]["system"] == BATCH_EXTRACT_SYSTEM_PROMPT
        assert results[0] is not None and results[0].amount == 5000
        assert results[1] is not None and not results[1].is_payment

    async def test_falls_back_to_single_calls(self) -> None:
        calls: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            payload = json.loads(request.content)
            calls.append(payload)
            if payload["system"] == BATCH_EXTRACT_SYSTEM_PROMPT:
                return _generate_response("[]")
            return _generate_response(SINGLE_RESPONSE)

        results = await _extractor(handler).extract_batch([BODY, BODY, BODY], [0, 0, 0])

        assert len(calls) == 4
        assert all(r is not None and r.amount == 5000 for r in results)

    async def test_single_body_skips_batch_prompt(self) -> None:
        calls: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(json.loads(request.content))
            return _generate_response(SINGLE_RESPONSE)

        results = await _extractor(handler).extract_batch([BODY], [TIMESTAMP_MS])
        assert len(results) == 1
        assert calls[0]["system"] != BATCH_EXTRACT_SYSTEM_PROMPT


class TestGenerateRegex:
    SAMPLES = [
        "[KB국민]11/05 12:30 스타벅스강남 5,000원 승인",
        "[KB국민]11/05 12:41 스타벅스강남 12,000원 승인",
        "[KB국민]11/06 09:02 스타벅스강남 4,500원 승인",
    ]

    async def test_returns_validated_triple(self) -> None:
        payloads: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            payloads.append(json.loads(request.content))
            body = {"isPayment": True, "amountRegex": KB_AMOUNT_REGEX, "storeRegex": KB_STORE_REGEX}
            return _generate_response(json.dumps(body))

        triple = await _extractor(handler).generate_regex_for_group(self.SAMPLES, [0, 0, 0])

        assert triple is not None
        assert triple.amount_regex == KB_AMOUNT_REGEX
        assert payloads[0]["system"] == REGEX_SYSTEM_PROMPT
        assert payloads[0]["format"] == "json"
        assert payloads[0]["options"]["temperature"] == 0.0

    async def test_rejects_triple_that_fails_samples(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            body = {"isPayment": True, "amountRegex": r"(\d+)달러", "storeRegex": KB_STORE_REGEX}
            return _generate_response(json.dumps(body))

        assert await _extractor(handler).generate_regex_for_group(self.SAMPLES, []) is None

    async def test_no_samples(self) -> None:
        extractor = _extractor(lambda r: pytest.fail("no request expected"))
        assert await extractor.generate_regex_for_group(["  "], []) is None


class TestHealthCheck:
    async def test_model_available(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/api/tags"
            return httpx.Response(200, json={"models": [{"name": "qwen2.5:3b"}]})

        assert await _extractor(handler).health_check()

    async def test_model_missing(self) -> None:
        handler = lambda r: httpx.Response(200, json={"models": [{"name": "llama3.2:3b"}]})  # noqa: E731
        assert not await _extractor(handler).health_check()

    async def test_unreachable(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        assert not await _extractor(handler).health_check()
