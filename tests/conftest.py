"""Test fixtures for the payment SMS service."""

from collections.abc import Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from paysms_ml import __version__
from paysms_ml.api.routes import classify, health, patterns
from paysms_ml.config.settings import Settings
from paysms_ml.data_models import ExtractionResult, RegexTriple
from paysms_ml.inference import EmbeddingService
from paysms_ml.pipeline import BatchPipeline
from paysms_ml.realtime import RealtimeClassifier
from paysms_ml.shared import SharedInfrastructure
from paysms_ml.storage import InMemoryPatternStore

from tests.fakes import KB_AMOUNT_REGEX, KB_CARD_REGEX, KB_STORE_REGEX, FakeEncoder, FakeLlm


@pytest.fixture
def settings() -> Settings:
    """Settings with defaults only (no env file)."""
    return Settings(_env_file=None, llm_enabled=False, telemetry_enabled=False)


@pytest.fixture
def encoder() -> FakeEncoder:
    return FakeEncoder()


@pytest.fixture
def embedding_service(encoder: FakeEncoder) -> EmbeddingService:
    return EmbeddingService(encoder, batch_size=10, concurrency=2)


@pytest.fixture
def store() -> InMemoryPatternStore:
    return InMemoryPatternStore()


@pytest.fixture
def kb_payment() -> ExtractionResult:
    return ExtractionResult(
        is_payment=True,
        amount=1000,
        store_name="스타벅스강남",
        card_name="KB국민",
        category="카페",
        date_time="2024-11-05 12:00",
    )


@pytest.fixture
def kb_regex() -> RegexTriple:
    return RegexTriple(
        amount_regex=KB_AMOUNT_REGEX,
        store_regex=KB_STORE_REGEX,
        card_regex=KB_CARD_REGEX,
    )


@pytest.fixture
def fake_llm(kb_payment: ExtractionResult, kb_regex: RegexTriple) -> FakeLlm:
    return FakeLlm(kb_payment, kb_regex)


@pytest.fixture
def test_client(
    encoder: FakeEncoder,
    store: InMemoryPatternStore,
    fake_llm: FakeLlm,
    settings: Settings,
) -> Generator[TestClient, None, None]:
    """Test client over fake encoder, LLM and in-memory store."""
    # Create app without lifespan to avoid loading real models
    app = FastAPI(title="Payment SMS ML Service (Test)", version=__version__)

    app.include_router(health.router)
    app.include_router(classify.router)
    app.include_router(patterns.router)

    infra = SharedInfrastructure.create(encoder=encoder, settings=settings, llm=fake_llm)
    app.state.infra = infra
    app.state.batch_pipeline = BatchPipeline.from_infrastructure(infra, store)
    app.state.realtime = RealtimeClassifier.from_infrastructure(infra, store)

    with TestClient(app) as client:
        yield client
