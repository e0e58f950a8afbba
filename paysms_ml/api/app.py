"""FastAPI application with lifespan management."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from paysms_ml import __version__
from paysms_ml.config.settings import Settings, get_settings
from paysms_ml.inference._models import create_encoder
from paysms_ml.inference.llm import LlmExtractor, OllamaSmsExtractor
from paysms_ml.pipeline import BatchPipeline
from paysms_ml.realtime import RealtimeClassifier
from paysms_ml.shared import SharedInfrastructure
from paysms_ml.storage import PatternRepository, create_tables, get_engine, get_session_maker
from paysms_ml.telemetry import HttpSampleUploader, SampleCollector


def configure_logging() -> None:
    """Configure logging for the service."""
    settings = get_settings()
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    logging.getLogger("paysms_ml").setLevel(log_level)

    # Quiet noisy third-party libraries
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("sentence_transformers").setLevel(logging.WARNING)
    logging.getLogger("transformers").setLevel(logging.WARNING)


configure_logging()
logger = logging.getLogger(__name__)


def _log_settings(settings: Settings) -> None:
    logger.info("=" * 60)
    logger.info("Payment SMS Service Configuration")
    logger.info("=" * 60)
    logger.info("  Log level: %s", settings.log_level)
    logger.info("  Database: %s", settings.database_url.split("@")[-1])  # Hide password
    logger.info("  Encoder: %s (%s)", settings.encoder_model, settings.encoder_backend)
    logger.info("  Thresholds:")
    logger.info("    Auto apply: %.2f", settings.auto_apply_threshold)
    logger.info("    Confirm: %.2f", settings.confirm_threshold)
    logger.info("    Group: %.2f", settings.group_threshold)
    logger.info("    Non-payment: %.2f", settings.non_payment_threshold)
    logger.info("  LLM:")
    logger.info("    Enabled: %s", settings.llm_enabled)
    if settings.llm_enabled:
        logger.info("    Ollama: %s (%s)", settings.ollama_base_url, settings.ollama_model)
        logger.info(
            "    Batch size: %d, concurrency: %d",
            settings.llm_batch_size,
            settings.llm_concurrency,
        )
    logger.info("  Telemetry: %s", settings.telemetry_enabled)
    logger.info("=" * 60)


async def _create_llm(settings: Settings) -> LlmExtractor | None:
    if not settings.llm_enabled:
        logger.info("LLM tier disabled")
        return None

    llm = OllamaSmsExtractor(
        model=settings.ollama_model,
        base_url=settings.ollama_base_url,
        timeout=settings.ollama_timeout,
        regex_sample_size=settings.regex_sample_size,
        regex_min_success_ratio=settings.regex_min_success_ratio,
        timezone=settings.timezone,
    )
    if not await llm.health_check():
        logger.warning(
            "Ollama model '%s' not reachable at %s; LLM calls will fail until it is",
            settings.ollama_model,
            settings.ollama_base_url,
        )
    return llm


def _create_collector(settings: Settings) -> SampleCollector | None:
    if not settings.telemetry_enabled:
        return None
    if not settings.telemetry_url:
        logger.warning("Telemetry enabled but no telemetry_url set; sample collection disabled")
        return None
    uploader = HttpSampleUploader(settings.telemetry_url, timeout=settings.telemetry_timeout)
    return SampleCollector(uploader, dedup_similarity=settings.telemetry_dedup_similarity)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Load models at startup, cleanup at shutdown."""
    settings = get_settings()
    _log_settings(settings)

    engine = get_engine()
    await create_tables(engine)
    app.state.db_engine = engine

    logger.info(
        "Loading encoder: backend=%s, model=%s",
        settings.encoder_backend,
        settings.encoder_model,
    )
    encoder = create_encoder(settings)
    encoder.warmup()
    logger.info("Encoder loaded: %s (dim=%d)", encoder.model_name, encoder.dimension)

    infra = SharedInfrastructure.create(
        encoder=encoder,
        settings=settings,
        llm=await _create_llm(settings),
        collector=_create_collector(settings),
    )
    store = PatternRepository(get_session_maker())

    app.state.infra = infra
    app.state.batch_pipeline = BatchPipeline.from_infrastructure(infra, store)
    app.state.realtime = RealtimeClassifier.from_infrastructure(infra, store)

    logger.info("Service ready - pipelines initialized")
    yield

    logger.info("Shutting down")
    if infra.collector is not None:
        await infra.collector.drain()
    del app.state.batch_pipeline
    del app.state.realtime
    del app.state.infra

    await app.state.db_engine.dispose()
    del app.state.db_engine


def create_app() -> FastAPI:
    """Create FastAPI application."""
    from paysms_ml.api.routes import classify, health, patterns

    app = FastAPI(
        title="Payment SMS Service",
        description="Payment SMS classification and pattern learning",
        version=__version__,
        lifespan=lifespan,
    )

    app.include_router(health.router, tags=["health"])
    app.include_router(classify.router, tags=["classification"])
    app.include_router(patterns.router, tags=["patterns"])

    return app


# For uvicorn
app = create_app()
