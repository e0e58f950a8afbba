"""Tests for RealtimeClassifier."""

from paysms_ml.config.settings import Settings
from paysms_ml.data_models import Message
from paysms_ml.inference import EmbeddingService
from paysms_ml.preprocessing import templateize
from paysms_ml.realtime import RealtimeClassifier
from paysms_ml.storage import InMemoryPatternStore

from tests.fakes import (
    KB_AMOUNT_REGEX,
    KB_STORE_REGEX,
    FakeEncoder,
    kb_message,
    make_pattern,
    unit_vector,
)


def _classifier(
    settings: Settings,
    store: InMemoryPatternStore,
    encoder: FakeEncoder,
) -> RealtimeClassifier:
    return RealtimeClassifier(store, EmbeddingService(encoder), settings)


class TestRealtimeClassifier:
    async def test_cache_hit(self, settings: Settings) -> None:
        message = kb_message(3)
        encoder = FakeEncoder(overrides={templateize(message.body): unit_vector(0.96)})
        store = InMemoryPatternStore(
            [make_pattern(unit_vector(), amount_regex=KB_AMOUNT_REGEX, store_regex=KB_STORE_REGEX)]
        )

        result = await _classifier(settings, store, encoder).classify(message)

        assert result is not None
        assert result.resolved_by == "cache"
        assert result.analysis.amount == 1300
        assert store.get(1).match_count == 2

    async def test_non_payment_hit_returns_none(self, settings: Settings) -> None:
        message = kb_message(0)
        encoder = FakeEncoder(overrides={templateize(message.body): unit_vector()})
        store = InMemoryPatternStore([make_pattern(unit_vector(), is_payment=False)])

        assert await _classifier(settings, store, encoder).classify(message) is None

    async def test_rules_fallback_without_patterns(self, settings: Settings) -> None:
        message = Message(
            id="m1",
            address="15881688",
            body="[KB국민]11/05 12:30 스타벅스강남 5,000원 승인",
            timestamp_ms=1_730_777_400_000,
        )

        result = await _classifier(settings, InMemoryPatternStore(), FakeEncoder()).classify(message)

        assert result is not None
        assert result.resolved_by == "rules"
        assert result.source == "rules"
        assert result.confidence == 0.7
        assert result.analysis.amount == 5000
        assert result.analysis.store_name == "스타벅스강남"
        assert result.analysis.card_name == "KB국민"

    async def test_rules_fallback_when_embedding_fails(self, settings: Settings) -> None:
        encoder = FakeEncoder(fail_on="스타벅스강남")

        result = await _classifier(settings, InMemoryPatternStore(), encoder).classify(
            kb_message(0)
        )

        assert result is not None
        assert result.resolved_by == "rules"

    async def test_filtered_message_is_not_embedded(self, settings: Settings) -> None:
        encoder = FakeEncoder()
        ad = Message(
            id="ad",
            address="15881688",
            body="[광고] 스타벅스 신메뉴 출시 기념 5,000원 할인쿠폰 증정",
            timestamp_ms=0,
        )

        assert await _classifier(settings, InMemoryPatternStore(), encoder).classify(ad) is None
        assert encoder.encoded == []
