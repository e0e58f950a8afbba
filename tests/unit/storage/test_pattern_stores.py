"""Tests for the in-memory and SQLAlchemy pattern stores."""

from collections.abc import AsyncGenerator
from datetime import UTC, datetime, timedelta
from pathlib import Path

import numpy as np
import pytest
from paysms_ml.exceptions import StorageError
from paysms_ml.storage import (
    InMemoryPatternStore,
    PatternRepository,
    create_pattern_engine,
    create_pattern_session_maker,
    create_tables,
)

from tests.fakes import make_pattern, unit_vector

NOW = datetime(2024, 11, 5, 12, 0, tzinfo=UTC)


@pytest.fixture
async def repository(tmp_path: Path) -> AsyncGenerator[PatternRepository, None]:
    engine = create_pattern_engine(f"sqlite+aiosqlite:///{tmp_path / 'patterns.db'}")
    await create_tables(engine)
    yield PatternRepository(create_pattern_session_maker(engine))
    await engine.dispose()


@pytest.fixture(params=["memory", "sqlalchemy"])
def pattern_store(request: pytest.FixtureRequest, repository: PatternRepository):
    if request.param == "memory":
        return InMemoryPatternStore()
    return repository


class TestPatternStore:
    async def test_insert_and_split_by_payment_flag(self, pattern_store) -> None:
        payment_id = await pattern_store.insert(
            make_pattern(unit_vector(), parsed_store="스타벅스강남", now=NOW)
        )
        await pattern_store.insert(make_pattern(unit_vector(0.2), is_payment=False, now=NOW))

        payment = await pattern_store.get_all_payment_patterns()
        non_payment = await pattern_store.get_all_non_payment_patterns()

        assert [p.id for p in payment] == [payment_id]
        assert payment[0].parsed_store == "스타벅스강남"
        assert len(non_payment) == 1
        assert not non_payment[0].is_payment

    async def test_embedding_round_trips(self, pattern_store) -> None:
        embedding = unit_vector(0.37)
        await pattern_store.insert(make_pattern(embedding, now=NOW))

        (stored,) = await pattern_store.get_all_payment_patterns()
        assert stored.embedding.dtype == np.float32
        np.testing.assert_allclose(stored.embedding, embedding)

    async def test_insertion_order(self, pattern_store) -> None:
        for store_name in ("가게1", "가게2", "가게3"):
            await pattern_store.insert(make_pattern(unit_vector(), parsed_store=store_name, now=NOW))

        patterns = await pattern_store.get_all_payment_patterns()
        assert [p.parsed_store for p in patterns] == ["가게1", "가게2", "가게3"]

    async def test_increment_match_count(self, pattern_store) -> None:
        pattern_id = await pattern_store.insert(make_pattern(unit_vector(), now=NOW))
        await pattern_store.increment_match_count(pattern_id, NOW + timedelta(days=1))

        (stored,) = await pattern_store.get_all_payment_patterns()
        assert stored.match_count == 2
        assert stored.last_matched_at.replace(tzinfo=UTC) == NOW + timedelta(days=1)

    async def test_delete_stale(self, pattern_store) -> None:
        old = NOW - timedelta(days=40)
        await pattern_store.insert(make_pattern(unit_vector(), parsed_store="stale", now=old))
        await pattern_store.insert(
            make_pattern(unit_vector(), parsed_store="popular", match_count=5, now=old)
        )
        await pattern_store.insert(make_pattern(unit_vector(), parsed_store="recent", now=NOW))

        deleted = await pattern_store.delete_stale(1, NOW - timedelta(days=30))

        assert deleted == 1
        remaining = await pattern_store.get_all_payment_patterns()
        assert [p.parsed_store for p in remaining] == ["popular", "recent"]


class TestPatternRepository:
    async def test_database_errors_raise_storage_error(self, tmp_path: Path) -> None:
        engine = create_pattern_engine(f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}")
        repository = PatternRepository(create_pattern_session_maker(engine))
        try:
            with pytest.raises(StorageError):
                await repository.get_all_payment_patterns()
            with pytest.raises(StorageError):
                await repository.insert(make_pattern(unit_vector(), now=NOW))
        finally:
            await engine.dispose()
