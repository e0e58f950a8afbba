from .encoder import Encoder, SentenceTransformerEncoder, create_encoder

__all__ = ["Encoder", "SentenceTransformerEncoder", "create_encoder"]
