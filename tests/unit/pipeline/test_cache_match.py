"""Tests for CacheMatcher."""

import pytest
from paysms_ml.data_models import Message
from paysms_ml.exceptions import StorageError
from paysms_ml.extraction import RegexExtractor
from paysms_ml.pipeline import EmbeddedMessage
from paysms_ml.pipeline.stages import CacheMatcher
from paysms_ml.similarity import SmsPatternPolicy
from paysms_ml.storage import InMemoryPatternStore

from tests.fakes import KB_AMOUNT_REGEX, KB_STORE_REGEX, make_pattern, unit_vector

BODY = "[KB국민]11/05 12:30 스타벅스강남 5,000원 승인"


def _item(cosine: float, body: str = BODY) -> EmbeddedMessage:
    message = Message(id="m1", address="15881688", body=body, timestamp_ms=1_730_777_400_000)
    return EmbeddedMessage(message, "template", unit_vector(cosine))


def _matcher(store: InMemoryPatternStore) -> CacheMatcher:
    return CacheMatcher(store, SmsPatternPolicy(), RegexExtractor())


@pytest.fixture
async def seeded_store() -> InMemoryPatternStore:
    store = InMemoryPatternStore()
    await store.insert(
        make_pattern(
            unit_vector(),
            amount_regex=KB_AMOUNT_REGEX,
            store_regex=KB_STORE_REGEX,
            parsed_card="KB국민",
            parsed_category="카페",
            parse_source="llm_regex",
        )
    )
    return store


class TestCacheMatcher:
    async def test_match_at_confirm_threshold(self, seeded_store: InMemoryPatternStore) -> None:
        result = await _matcher(seeded_store).process([_item(0.93)])

        (accepted,) = result.accepted
        assert accepted.resolved_by == "cache"
        assert accepted.source == "llm_regex"
        assert accepted.confidence == pytest.approx(0.93, abs=1e-4)
        assert accepted.analysis.amount == 5000
        assert seeded_store.get(1).match_count == 2

    async def test_repeat_classification_counts_each_match_once(
        self, seeded_store: InMemoryPatternStore
    ) -> None:
        matcher = _matcher(seeded_store)

        first = await matcher.process([_item(1.0)])
        assert seeded_store.get(1).match_count == 2
        second = await matcher.process([_item(1.0)])
        assert seeded_store.get(1).match_count == 3

        assert [r.analysis for r in second.accepted] == [r.analysis for r in first.accepted]
        assert len(seeded_store) == 1

    async def test_below_confirm_is_unmatched(self, seeded_store: InMemoryPatternStore) -> None:
        result = await _matcher(seeded_store).process([_item(0.91)])
        assert result.accepted == []
        assert len(result.unmatched) == 1

    async def test_non_payment_needs_stricter_threshold(self) -> None:
        store = InMemoryPatternStore([make_pattern(unit_vector(), is_payment=False)])

        rejected = await _matcher(store).process([_item(0.98)])
        not_rejected = await _matcher(store).process([_item(0.96)])

        assert rejected.rejected == 1
        assert not_rejected.rejected == 0
        assert len(not_rejected.unmatched) == 1

    async def test_extraction_miss_is_unmatched(self, seeded_store: InMemoryPatternStore) -> None:
        result = await _matcher(seeded_store).process([_item(1.0, body="스타벅스강남 승인 완료 감사합니다")])
        assert len(result.unmatched) == 1

    async def test_storage_failure_treated_as_empty_cache(self) -> None:
        class BrokenStore(InMemoryPatternStore):
            async def get_all_payment_patterns(self):
                msg = "db down"
                raise StorageError(msg)

        result = await _matcher(BrokenStore()).process([_item(1.0)])
        assert len(result.unmatched) == 1
