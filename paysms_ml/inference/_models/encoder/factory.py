"""Encoder factory for creating encoder instances based on configuration."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .protocol import Encoder
from .sentence_transformer import SentenceTransformerEncoder

if TYPE_CHECKING:
    from paysms_ml.config.settings import Settings

logger = logging.getLogger(__name__)


def create_encoder(settings: Settings) -> Encoder:
    """Create an encoder based on settings.

    Parameters
    ----------
    settings
        Settings naming the encoder backend, model, device and sequence limit.

    Returns
    -------
    Encoder
        Loaded encoder, not yet warmed up.

    Raises
    ------
    ValueError
        If the encoder backend is not supported.
    """
    backend = settings.encoder_backend
    model = settings.encoder_model

    logger.info("Creating encoder: backend=%s, model=%s", backend, model)

    if backend == "sentence-transformers":
        return SentenceTransformerEncoder.load(
            model,
            device=settings.device,
            max_seq_length=settings.encoder_max_seq_length,
        )

    msg = f"Unknown encoder backend: {backend}"
    raise ValueError(msg)
