"""Learned SMS pattern domain model."""

from datetime import datetime
from typing import Literal

import numpy as np
from numpy.typing import NDArray
from pydantic import BaseModel, ConfigDict, field_validator

ParseSource = Literal["llm_regex", "template_regex", "llm"]

CONFIDENCE_BY_SOURCE: dict[str, float] = {
    "llm_regex": 1.0,
    "template_regex": 0.85,
    "llm": 0.8,
}


class Pattern(BaseModel):
    """A message template learned from an LLM-resolved cluster.

    Payment patterns carry the parsed fields of their representative and,
    when available, a regex triple that re-extracts fields from new bodies.
    Non-payment patterns only carry the embedding.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    id: int | None = None
    template: str
    sender_address: str
    embedding: NDArray[np.float32]
    is_payment: bool
    parsed_amount: int = 0
    parsed_store: str = ""
    parsed_card: str = ""
    parsed_category: str = ""
    amount_regex: str = ""
    store_regex: str = ""
    card_regex: str = ""
    parse_source: str = "llm"
    confidence: float = 0.8
    match_count: int = 1
    created_at: datetime
    last_matched_at: datetime

    @field_validator("embedding", mode="before")
    @classmethod
    def parse_embedding(cls, v: bytes | list[float] | NDArray[np.float32]) -> NDArray[np.float32]:
        """Convert bytes or lists to a float32 numpy array."""
        if isinstance(v, bytes):
            return np.frombuffer(v, dtype=np.float32)
        return np.asarray(v, dtype=np.float32)

    @property
    def has_regex(self) -> bool:
        return bool(self.amount_regex) and bool(self.store_regex)

    def embedding_bytes(self) -> bytes:
        """Serialize embedding to bytes for storage."""
        return self.embedding.astype(np.float32).tobytes()
