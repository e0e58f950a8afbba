"""Shared infrastructure for the classification pipelines.

Heavy or stateful resources that are created once at app startup and shared
across requests. Per-process state that must outlive a single batch (the
regex failure tracker, the telemetry dedup list) lives here too.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from paysms_ml.pipeline.failure_tracker import RegexFailureTracker

if TYPE_CHECKING:
    from paysms_ml.config.settings import Settings
    from paysms_ml.inference import EmbeddingService
    from paysms_ml.inference._models import Encoder
    from paysms_ml.inference.llm import LlmExtractor
    from paysms_ml.telemetry import SampleCollector


@dataclass
class SharedInfrastructure:
    """Resources shared across all requests (singleton in app lifespan).

    - embedding_service: wraps the encoder (large memory footprint)
    - llm: optional LLM extractor; without it only the cache tier runs
    - collector: optional telemetry sample collector
    - failure_tracker: regex generation cooldowns per template
    """

    encoder: Encoder
    embedding_service: EmbeddingService
    settings: Settings
    failure_tracker: RegexFailureTracker
    llm: LlmExtractor | None = None
    collector: SampleCollector | None = None

    @classmethod
    def create(
        cls,
        encoder: Encoder,
        settings: Settings,
        llm: LlmExtractor | None = None,
        collector: SampleCollector | None = None,
    ) -> SharedInfrastructure:
        """Create shared infrastructure from settings."""
        from paysms_ml.inference import EmbeddingService

        return cls(
            encoder=encoder,
            embedding_service=EmbeddingService(
                encoder,
                batch_size=settings.embedding_batch_size,
                concurrency=settings.embedding_concurrency,
            ),
            settings=settings,
            failure_tracker=RegexFailureTracker(
                threshold=settings.regex_failure_threshold,
                cooldown_seconds=settings.regex_failure_cooldown_seconds,
            ),
            llm=llm,
            collector=collector,
        )
