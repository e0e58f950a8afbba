"""Ollama-based SMS extractor.

Sends message bodies to a local Ollama instance to judge whether they are
payments and to extract their fields, and asks it for extraction regexes
shared by a cluster of same-format messages.

Recommended models:
- qwen2.5:3b    (2GB)  - default, good Korean coverage
- qwen2.5:7b    (5GB)  - better regexes for unusual formats
"""

from __future__ import annotations

import logging
from typing import Any
from zoneinfo import ZoneInfo

import httpx

from paysms_ml.data_models import ExtractionResult, RegexTriple
from paysms_ml.data_models.extraction import DEFAULT_CARD_NAME, DEFAULT_STORE_NAME
from paysms_ml.preprocessing import normalize_category

from ._json import extract_json_array, extract_json_object
from .prompts import (
    BATCH_EXTRACT_SYSTEM_PROMPT,
    EXTRACT_SYSTEM_PROMPT,
    REGEX_SYSTEM_PROMPT,
    build_batch_prompt,
    build_regex_prompt,
    build_single_prompt,
)
from .regex_validation import validate_regex_triple

logger = logging.getLogger(__name__)

SINGLE_NUM_PREDICT = 256
BATCH_NUM_PREDICT = 4096
REGEX_NUM_PREDICT = 1024


class OllamaSmsExtractor:
    """LlmExtractor backed by the Ollama /api/generate endpoint."""

    def __init__(
        self,
        model: str = "qwen2.5:3b",
        base_url: str = "http://localhost:11434",
        timeout: float = 60.0,
        regex_sample_size: int = 3,
        regex_min_success_ratio: float = 0.8,
        timezone: str = "Asia/Seoul",
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._regex_sample_size = regex_sample_size
        self._regex_min_success_ratio = regex_min_success_ratio
        self._tz = ZoneInfo(timezone)
        self._transport = transport

    @property
    def model_name(self) -> str:
        return self._model

    # ---- extraction ----

    async def extract(self, body: str, timestamp_ms: int = 0) -> ExtractionResult | None:
        """Extract one message; None when the call or the parse fails."""
        try:
            prompt = build_single_prompt(body, timestamp_ms, self._tz)
            response_text = await self._generate(prompt, EXTRACT_SYSTEM_PROMPT, SINGLE_NUM_PREDICT)
        except Exception as e:
            self._log_request_error(e)
            return None

        if not response_text:
            return None
        logger.debug("Extraction response: %s", response_text[:100])
        data = extract_json_object(response_text)
        if data is None:
            logger.debug("Could not parse extraction response: %s", response_text[:100])
            return None
        return _to_extraction_result(data)

    async def extract_batch(
        self,
        bodies: list[str],
        timestamps: list[int],
    ) -> list[ExtractionResult | None]:
        """Extract several messages with one numbered prompt.

        Falls back to one call per message when the batch call fails or
        fewer than half of its entries can be parsed.
        """
        if not bodies:
            return []
        if len(bodies) == 1:
            return [await self.extract(bodies[0], timestamps[0] if timestamps else 0)]

        parsed: list[ExtractionResult | None] | None = None
        try:
            prompt = build_batch_prompt(bodies, timestamps, self._tz)
            response_text = await self._generate(
                prompt, BATCH_EXTRACT_SYSTEM_PROMPT, BATCH_NUM_PREDICT
            )
            if response_text:
                parsed = self._parse_batch_response(response_text, len(bodies))
        except Exception as e:
            self._log_request_error(e)

        if parsed is not None:
            logger.debug(
                "Batch extraction parsed %d/%d",
                sum(1 for r in parsed if r is not None),
                len(bodies),
            )
            return parsed

        logger.warning("Batch extraction failed, falling back to %d single calls", len(bodies))
        results: list[ExtractionResult | None] = []
        for i, body in enumerate(bodies):
            ts = timestamps[i] if i < len(timestamps) else 0
            results.append(await self.extract(body, ts))
        return results

    def _parse_batch_response(
        self,
        response_text: str,
        expected: int,
    ) -> list[ExtractionResult | None] | None:
        items = extract_json_array(response_text)
        if items is None:
            logger.debug("No JSON array in batch response: %s", response_text[:100])
            return None

        by_number: dict[int, ExtractionResult] = {}
        for item in items:
            if not isinstance(item, dict):
                continue
            try:
                number = int(item["no"])
            except (KeyError, TypeError, ValueError):
                continue
            result = _to_extraction_result(item)
            if result is not None:
                by_number[number] = result

        results = [by_number.get(n) for n in range(1, expected + 1)]
        parsed_count = sum(1 for r in results if r is not None)
        if parsed_count < expected // 2:
            logger.warning("Too few batch entries parsed: %d/%d", parsed_count, expected)
            return None
        return results

    # ---- regex synthesis ----

    async def generate_regex_for_group(
        self,
        sample_bodies: list[str],
        sample_timestamps: list[int],
    ) -> RegexTriple | None:
        """Ask for a regex triple common to the samples and validate it on them."""
        samples = [b for b in sample_bodies if b.strip()][: self._regex_sample_size]
        if not samples:
            return None

        try:
            prompt = build_regex_prompt(samples, sample_timestamps, self._tz)
            response_text = await self._generate(
                prompt, REGEX_SYSTEM_PROMPT, REGEX_NUM_PREDICT, json_format=True
            )
        except Exception as e:
            self._log_request_error(e)
            return None

        triple = _to_regex_triple(extract_json_object(response_text or ""))
        validation = validate_regex_triple(triple, samples, self._regex_min_success_ratio)
        if not validation.is_valid:
            logger.info(
                "Regex rejected (reason=%s, ratio=%.2f)",
                validation.reason,
                validation.success_ratio,
            )
            return None
        return triple

    # ---- transport ----

    async def _generate(
        self,
        prompt: str,
        system: str,
        num_predict: int,
        json_format: bool = False,
    ) -> str:
        url = f"{self._base_url}/api/generate"
        payload: dict[str, Any] = {
            "model": self._model,
            "prompt": prompt,
            "system": system,
            "stream": False,
            "options": {
                "temperature": 0.0 if json_format else 0.1,
                "num_predict": num_predict,
            },
        }
        if json_format:
            payload["format"] = "json"

        # Allow extra time for model loading (cold start)
        timeout = httpx.Timeout(connect=5.0, read=self._timeout, write=10.0, pool=5.0)
        async with httpx.AsyncClient(timeout=timeout, transport=self._transport) as client:
            response = await client.post(url, json=payload)
            response.raise_for_status()
            data = response.json()
            return data.get("response", "")

    def _log_request_error(self, e: Exception) -> None:
        if isinstance(e, httpx.TimeoutException):
            logger.warning("Ollama request timed out after %.1fs", self._timeout)
        elif isinstance(e, httpx.ConnectError):
            logger.warning("Could not connect to Ollama at %s. Is it running?", self._base_url)
        elif isinstance(e, httpx.ReadError):
            logger.warning(
                "Connection to Ollama was interrupted while reading response. "
                "The model may still be loading.",
            )
        else:
            logger.warning(
                "Ollama request failed: %s (type: %s)",
                str(e) or repr(e),
                type(e).__name__,
            )

    async def health_check(self) -> bool:
        """Whether Ollama is reachable and the configured model is installed."""
        try:
            async with httpx.AsyncClient(timeout=5.0, transport=self._transport) as client:
                response = await client.get(f"{self._base_url}/api/tags")
                if response.status_code != 200:
                    return False
                models = [m.get("name", "") for m in response.json().get("models", [])]
        except Exception as e:
            logger.debug("Ollama health check failed: %s", str(e))
            return False

        available = any(
            self._model in name or name.startswith(self._model.split(":")[0]) for name in models
        )
        if not available:
            logger.warning("Model '%s' not found in Ollama. Available: %s", self._model, models)
        return available


def _to_extraction_result(data: dict[str, Any]) -> ExtractionResult | None:
    try:
        amount = int(str(data.get("amount") or 0).replace(",", ""))
    except ValueError:
        amount = 0
    try:
        return ExtractionResult(
            is_payment=_is_true(data.get("isPayment")),
            amount=amount,
            store_name=str(data.get("storeName") or DEFAULT_STORE_NAME).strip()
            or DEFAULT_STORE_NAME,
            card_name=str(data.get("cardName") or DEFAULT_CARD_NAME).strip() or DEFAULT_CARD_NAME,
            category=normalize_category(str(data.get("category") or "")),
            date_time=str(data.get("dateTime") or ""),
        )
    except (TypeError, ValueError) as e:
        logger.debug("Invalid extraction entry %s: %s", data, e)
        return None


def _to_regex_triple(data: dict[str, Any] | None) -> RegexTriple | None:
    if data is None:
        return None
    return RegexTriple(
        is_payment=bool(data.get("isPayment", False)),
        amount_regex=str(data.get("amountRegex") or "").strip(),
        store_regex=str(data.get("storeRegex") or "").strip(),
        card_regex=str(data.get("cardRegex") or "").strip(),
    )


def _is_true(value: Any) -> bool:
    return value is True or (isinstance(value, str) and value.strip().lower() == "true")
