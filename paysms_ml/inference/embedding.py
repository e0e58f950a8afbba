"""Template embedding with bounded, chunked fan-out.

The encoder runs in worker threads. Templates are split into chunks of
``batch_size``; at most ``concurrency`` chunks are encoded at once and all
chunks are joined before returning. A failed chunk is retried item by item
so one bad input only loses its own embedding.
"""

from __future__ import annotations

import asyncio
import logging

import numpy as np
from numpy.typing import NDArray

from paysms_ml.inference._models import Encoder
from paysms_ml.preprocessing import templateize

logger = logging.getLogger(__name__)


class EmbeddingService:
    def __init__(
        self,
        encoder: Encoder,
        batch_size: int = 100,
        concurrency: int = 10,
    ):
        self._encoder = encoder
        self._batch_size = max(1, batch_size)
        self._semaphore = asyncio.Semaphore(max(1, concurrency))

    @property
    def dimension(self) -> int:
        return self._encoder.dimension

    @staticmethod
    def templateize(body: str) -> str:
        return templateize(body)

    async def embed(self, text: str) -> NDArray[np.float32] | None:
        """Embed a single text; None on failure."""
        return (await self.generate_embeddings([text]))[0]

    async def generate_embeddings(self, texts: list[str]) -> list[NDArray[np.float32] | None]:
        """Embed texts in order. Positions whose embedding failed hold None."""
        if not texts:
            return []

        chunks = [
            (start, texts[start : start + self._batch_size])
            for start in range(0, len(texts), self._batch_size)
        ]
        results: list[NDArray[np.float32] | None] = [None] * len(texts)

        chunk_results = await asyncio.gather(
            *(self._encode_chunk(chunk) for _, chunk in chunks)
        )
        for (start, _), embedded in zip(chunks, chunk_results):
            results[start : start + len(embedded)] = embedded

        failed = sum(1 for r in results if r is None)
        if failed:
            logger.warning("Embedding failed for %d/%d texts", failed, len(texts))
        return results

    async def _encode_chunk(self, chunk: list[str]) -> list[NDArray[np.float32] | None]:
        async with self._semaphore:
            try:
                matrix = await asyncio.to_thread(self._encoder.encode, chunk)
                return [row for row in matrix]
            except Exception as e:
                logger.warning(
                    "Chunk embedding failed (%d texts), retrying per item: %s", len(chunk), e
                )

            embedded: list[NDArray[np.float32] | None] = []
            for text in chunk:
                try:
                    matrix = await asyncio.to_thread(self._encoder.encode, [text])
                    embedded.append(matrix[0])
                except Exception as e:
                    logger.debug("Embedding failed for one text: %s", e)
                    embedded.append(None)
            return embedded
