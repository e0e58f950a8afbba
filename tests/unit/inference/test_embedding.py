"""Tests for EmbeddingService."""

import numpy as np
from paysms_ml.inference import EmbeddingService

from tests.fakes import FakeEncoder


class TestGenerateEmbeddings:
    async def test_preserves_order_across_chunks(self) -> None:
        encoder = FakeEncoder()
        service = EmbeddingService(encoder, batch_size=3, concurrency=2)
        texts = [f"template {i}" for i in range(10)]

        embeddings = await service.generate_embeddings(texts)

        assert len(embeddings) == 10
        for text, embedding in zip(texts, embeddings):
            assert embedding is not None
            np.testing.assert_allclose(embedding, encoder.encode([text])[0])

    async def test_failed_item_yields_none(self) -> None:
        service = EmbeddingService(FakeEncoder(fail_on="BAD"), batch_size=4)

        embeddings = await service.generate_embeddings(["a", "BAD", "c", "d", "e"])

        assert embeddings[1] is None
        assert all(e is not None for i, e in enumerate(embeddings) if i != 1)

    async def test_empty_input(self) -> None:
        assert await EmbeddingService(FakeEncoder()).generate_embeddings([]) == []

    async def test_embed_single(self) -> None:
        service = EmbeddingService(FakeEncoder(dimension=16))
        embedding = await service.embed("hello")
        assert embedding is not None
        assert embedding.shape == (16,)
        assert service.dimension == 16


def test_templateize_delegates() -> None:
    assert EmbeddingService.templateize("5,000원 승인") == "{AMOUNT}원 승인"
