"""SQLAlchemy table definitions.

These are thin persistence mappings. Domain logic lives in Pydantic models.
"""

from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    Float,
    Index,
    Integer,
    LargeBinary,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class PatternTable(Base):
    """Learned SMS patterns table."""

    __tablename__ = "sms_patterns"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    template: Mapped[str] = mapped_column(Text, nullable=False)
    sender_address: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    embedding: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
    is_payment: Mapped[bool] = mapped_column(Boolean, nullable=False)
    parsed_amount: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    parsed_store: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    parsed_card: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    parsed_category: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    amount_regex: Mapped[str] = mapped_column(Text, nullable=False, default="")
    store_regex: Mapped[str] = mapped_column(Text, nullable=False, default="")
    card_regex: Mapped[str] = mapped_column(Text, nullable=False, default="")
    parse_source: Mapped[str] = mapped_column(String(20), nullable=False, default="llm")
    confidence: Mapped[float] = mapped_column(Float, nullable=False, default=0.8)
    match_count: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    last_matched_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index("ix_sms_patterns_is_payment", "is_payment"),
        Index("ix_sms_patterns_last_matched", "last_matched_at"),
    )
