"""Telemetry sample upload."""

from __future__ import annotations

import logging
from typing import Protocol

import httpx
from pydantic import BaseModel

logger = logging.getLogger(__name__)


class TelemetrySample(BaseModel):
    """A PII-masked message sample for offline regex curation."""

    sample_key: str
    masked_body: str
    card_name: str
    sender_address: str
    parse_source: str
    amount_regex: str = ""
    store_regex: str = ""
    card_regex: str = ""


class TelemetryUploader(Protocol):
    async def upload(self, sample: TelemetrySample) -> bool:
        """Send one sample; False on failure. Must not raise."""
        ...


class HttpSampleUploader:
    """Posts samples as JSON to a collector endpoint."""

    def __init__(
        self,
        url: str,
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._url = url
        self._timeout = timeout
        self._transport = transport

    async def upload(self, sample: TelemetrySample) -> bool:
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.post(
                    self._url, json=sample.model_dump(exclude_defaults=True)
                )
                response.raise_for_status()
        except httpx.TimeoutException:
            logger.warning("Telemetry upload timed out after %.1fs", self._timeout)
            return False
        except httpx.HTTPError as e:
            logger.warning("Telemetry upload failed: %s", e)
            return False

        logger.debug("Telemetry sample uploaded: %s", sample.sample_key)
        return True
