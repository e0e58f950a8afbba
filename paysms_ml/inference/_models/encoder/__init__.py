"""Encoder module for template embeddings.

Usage:
    from paysms_ml.inference._models import create_encoder, Encoder

    encoder = create_encoder(settings)
    embeddings = encoder.encode(["{DATE} {TIME} {AMOUNT}원 승인", ...])
"""

from .factory import create_encoder
from .protocol import Encoder
from .sentence_transformer import SentenceTransformerEncoder

__all__ = [
    "Encoder",
    "SentenceTransformerEncoder",
    "create_encoder",
]
