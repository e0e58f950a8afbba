"""Deduplicated, fire-and-forget telemetry sample collection."""

from __future__ import annotations

import asyncio
import hashlib
import logging

import numpy as np
from numpy.typing import NDArray

from paysms_ml.inference.vector_search import cosine_similarity

from .masking import mask_sms_body
from .uploader import TelemetrySample, TelemetryUploader

logger = logging.getLogger(__name__)


def sample_key(sender_address: str, template: str) -> str:
    digest = hashlib.sha1(template.encode("utf-8")).hexdigest()[:12]
    return f"{sender_address}_{digest}"


class SampleCollector:
    """Uploads masked samples, skipping near-duplicates of earlier uploads.

    Embeddings of accepted samples are kept for the collector's lifetime.
    The dedup check and the append happen under one lock so concurrent
    clusters cannot both upload the same format.
    """

    def __init__(self, uploader: TelemetryUploader, dedup_similarity: float = 0.99):
        self._uploader = uploader
        self._dedup_similarity = dedup_similarity
        self._sent_embeddings: list[NDArray[np.float32]] = []
        self._lock = asyncio.Lock()
        self._background_tasks: set[asyncio.Task[bool]] = set()

    @property
    def sent_count(self) -> int:
        return len(self._sent_embeddings)

    async def collect(
        self,
        embedding: NDArray[np.float32],
        body: str,
        template: str,
        sender_address: str,
        card_name: str,
        parse_source: str,
        amount_regex: str = "",
        store_regex: str = "",
        card_regex: str = "",
    ) -> bool:
        """Schedule an upload unless a similar sample was already sent.

        Returns whether an upload was scheduled.
        """
        async with self._lock:
            for sent in self._sent_embeddings:
                if cosine_similarity(embedding, sent) >= self._dedup_similarity:
                    logger.debug("Telemetry sample skipped as duplicate (%s)", sender_address)
                    return False
            self._sent_embeddings.append(embedding)

        sample = TelemetrySample(
            sample_key=sample_key(sender_address, template),
            masked_body=mask_sms_body(body),
            card_name=card_name,
            sender_address=sender_address,
            parse_source=parse_source,
            amount_regex=amount_regex,
            store_regex=store_regex,
            card_regex=card_regex,
        )

        task = asyncio.create_task(self._upload(sample))
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)
        return True

    async def _upload(self, sample: TelemetrySample) -> bool:
        try:
            return await self._uploader.upload(sample)
        except Exception as e:
            logger.warning("Fire-and-forget telemetry upload failed: %s", e)
            return False

    async def drain(self) -> None:
        """Wait for pending uploads (used on shutdown and in tests)."""
        if self._background_tasks:
            await asyncio.gather(*list(self._background_tasks), return_exceptions=True)
