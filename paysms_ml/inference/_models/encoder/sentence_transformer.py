"""SentenceTransformer-based encoder implementation."""

from __future__ import annotations

import logging

import numpy as np
from numpy.typing import NDArray
from sentence_transformers import SentenceTransformer

logger = logging.getLogger(__name__)


class SentenceTransformerEncoder:
    """Encoder using the sentence-transformers library.

    Embeddings are L2-normalized. Inputs are short message templates; the
    sequence length may be capped at load time.
    """

    WARMUP_TEMPLATE = "[{CARD}]{DATE} {TIME} {STORE} {AMOUNT}원 승인"

    def __init__(self, model: SentenceTransformer, model_name: str):
        self._model = model
        self._model_name = model_name
        self._dimension: int | None = None

    @classmethod
    def load(
        cls,
        model_name: str,
        device: str = "cpu",
        max_seq_length: int | None = None,
    ) -> SentenceTransformerEncoder:
        """Load a SentenceTransformer model by name or local path.

        Parameters
        ----------
        model_name
            Model identifier from HuggingFace Hub or local path.
            Example: "paraphrase-multilingual-MiniLM-L12-v2"
        device
            Torch device to load the model on.
        max_seq_length
            Token limit applied to the loaded model; None keeps its default.
        """
        logger.info("Loading SentenceTransformer model: %s (device=%s)", model_name, device)
        model = SentenceTransformer(model_name, device=device)
        if max_seq_length is not None:
            model.max_seq_length = max_seq_length
        return cls(model, model_name)

    @property
    def dimension(self) -> int:
        if self._dimension is None:
            dim = self._model.get_sentence_embedding_dimension()
            if dim is None:
                msg = "Could not determine embedding dimension from model."
                raise ValueError(msg)
            self._dimension = dim
        return self._dimension

    @property
    def model_name(self) -> str:
        return self._model_name

    def encode(self, texts: list[str]) -> NDArray[np.float32]:
        if not texts:
            return np.zeros((0, self.dimension), dtype=np.float32)

        embeddings = self._model.encode(
            texts,
            convert_to_numpy=True,
            show_progress_bar=False,
            normalize_embeddings=True,
        )
        return embeddings.astype(np.float32)

    def warmup(self) -> None:
        _ = self.encode([self.WARMUP_TEMPLATE])
        logger.debug("SentenceTransformer encoder warmed up")
