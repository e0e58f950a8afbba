"""Structured payment extracted from a message."""

from typing import Literal

from pydantic import BaseModel

from .message import Message

ResolvedBy = Literal["cache", "llm", "rules"]


class AnalysisResult(BaseModel):
    """Structured fields of one payment."""

    amount: int
    store_name: str
    category: str
    date_time: str
    card_name: str


class ClassifiedMessage(BaseModel):
    """An accepted message together with its extracted payment."""

    message: Message
    analysis: AnalysisResult
    resolved_by: ResolvedBy
    confidence: float
    source: str
