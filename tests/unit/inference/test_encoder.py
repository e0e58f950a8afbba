"""Tests for the sentence-transformers encoder adapter."""

from unittest.mock import MagicMock

import numpy as np
from paysms_ml.inference._models import Encoder
from paysms_ml.inference._models.encoder import SentenceTransformerEncoder


def _model(dimension: int = 4) -> MagicMock:
    model = MagicMock()
    model.get_sentence_embedding_dimension.return_value = dimension
    model.encode.side_effect = lambda texts, **_: np.ones((len(texts), dimension), dtype=np.float64)
    return model


class TestSentenceTransformerEncoder:
    def test_satisfies_protocol(self) -> None:
        assert isinstance(SentenceTransformerEncoder(_model(), "m"), Encoder)

    def test_encode_returns_float32_normalized_request(self) -> None:
        model = _model()
        encoder = SentenceTransformerEncoder(model, "m")

        embeddings = encoder.encode(["{DATE} {TIME} {AMOUNT}원 승인", "{AMOUNT}원 출금"])

        assert embeddings.shape == (2, 4)
        assert embeddings.dtype == np.float32
        assert model.encode.call_args.kwargs["normalize_embeddings"] is True

    def test_empty_input_skips_model(self) -> None:
        model = _model(dimension=8)

        embeddings = SentenceTransformerEncoder(model, "m").encode([])

        assert embeddings.shape == (0, 8)
        model.encode.assert_not_called()

    def test_warmup_encodes_template(self) -> None:
        model = _model()
        SentenceTransformerEncoder(model, "m").warmup()
        (texts,) = model.encode.call_args.args
        assert texts == [SentenceTransformerEncoder.WARMUP_TEMPLATE]
