import logging
from datetime import datetime

from sqlalchemy import and_, delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from paysms_ml.data_models import Pattern
from paysms_ml.exceptions import StorageError
from paysms_ml.storage.sqlalchemy.tables import PatternTable

logger = logging.getLogger(__name__)


class PatternRepository:
    """Repository for learned SMS patterns.

    Each operation runs in its own session so that concurrent pipeline tasks
    never share an AsyncSession.
    """

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self._session_maker = session_maker

    async def get_all_payment_patterns(self) -> list[Pattern]:
        """Get all payment patterns in insertion order."""
        return await self._get_by_payment_flag(True)

    async def get_all_non_payment_patterns(self) -> list[Pattern]:
        """Get all non-payment patterns in insertion order."""
        return await self._get_by_payment_flag(False)

    async def insert(self, pattern: Pattern) -> int:
        """Persist a new pattern and return its id."""
        row = PatternTable(
            template=pattern.template,
            sender_address=pattern.sender_address,
            embedding=pattern.embedding_bytes(),
            is_payment=pattern.is_payment,
            parsed_amount=pattern.parsed_amount,
            parsed_store=pattern.parsed_store,
            parsed_card=pattern.parsed_card,
            parsed_category=pattern.parsed_category,
            amount_regex=pattern.amount_regex,
            store_regex=pattern.store_regex,
            card_regex=pattern.card_regex,
            parse_source=pattern.parse_source,
            confidence=pattern.confidence,
            match_count=pattern.match_count,
            created_at=pattern.created_at,
            last_matched_at=pattern.last_matched_at,
        )
        try:
            async with self._session_maker() as session:
                session.add(row)
                await session.commit()
                return row.id
        except SQLAlchemyError as e:
            msg = "Failed to insert pattern"
            raise StorageError(msg, details={"template": pattern.template[:60]}) from e

    async def increment_match_count(self, pattern_id: int, matched_at: datetime) -> None:
        """Increment the match counter of a pattern."""
        stmt = (
            update(PatternTable)
            .where(PatternTable.id == pattern_id)
            .values(
                match_count=PatternTable.match_count + 1,
                last_matched_at=matched_at,
            )
        )
        try:
            async with self._session_maker() as session:
                await session.execute(stmt)
                await session.commit()
        except SQLAlchemyError as e:
            msg = "Failed to increment match count"
            raise StorageError(msg, details={"pattern_id": pattern_id}) from e

    async def delete_stale(self, max_match_count: int, older_than: datetime) -> int:
        """Delete rarely matched patterns not matched since the cutoff."""
        stmt = delete(PatternTable).where(
            and_(
                PatternTable.match_count <= max_match_count,
                PatternTable.last_matched_at < older_than,
            )
        )
        try:
            async with self._session_maker() as session:
                result = await session.execute(stmt)
                await session.commit()
        except SQLAlchemyError as e:
            msg = "Failed to delete stale patterns"
            raise StorageError(msg) from e

        deleted = result.rowcount or 0
        logger.info("Deleted %d stale patterns (cutoff=%s)", deleted, older_than.isoformat())
        return deleted

    async def _get_by_payment_flag(self, is_payment: bool) -> list[Pattern]:
        stmt = (
            select(PatternTable)
            .where(PatternTable.is_payment == is_payment)
            .order_by(PatternTable.id)
        )
        try:
            async with self._session_maker() as session:
                result = await session.execute(stmt)
                rows = result.scalars().all()
        except SQLAlchemyError as e:
            msg = "Failed to load patterns"
            raise StorageError(msg, details={"is_payment": is_payment}) from e

        return [_to_domain(row) for row in rows]


def _to_domain(row: PatternTable) -> Pattern:
    return Pattern(
        id=row.id,
        template=row.template,
        sender_address=row.sender_address,
        embedding=row.embedding,
        is_payment=row.is_payment,
        parsed_amount=row.parsed_amount,
        parsed_store=row.parsed_store,
        parsed_card=row.parsed_card,
        parsed_category=row.parsed_category,
        amount_regex=row.amount_regex,
        store_regex=row.store_regex,
        card_regex=row.card_regex,
        parse_source=row.parse_source,
        confidence=row.confidence,
        match_count=row.match_count,
        created_at=row.created_at,
        last_matched_at=row.last_matched_at,
    )
