"""Classification endpoints."""

import logging
import time
from collections import Counter

from fastapi import APIRouter

from paysms_ml.api.dependencies import BatchPipelineDep, RealtimeDep
from paysms_ml.api.schemas import (
    ClassificationStats,
    ClassifyBatchRequest,
    ClassifyBatchResponse,
    ClassifyRealtimeRequest,
    ClassifyRealtimeResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/classify/batch", response_model=ClassifyBatchResponse)
async def classify_batch(
    request: ClassifyBatchRequest,
    pipeline: BatchPipelineDep,
) -> ClassifyBatchResponse:
    """Classify a batch of messages, learning patterns for new formats."""
    start_time = time.perf_counter()
    logger.info("POST /classify/batch: messages=%d", len(request.messages))

    results = await pipeline.process_batch(request.messages, max_count=request.max_count)

    total = len(request.messages) if request.max_count is None else min(
        len(request.messages), request.max_count
    )
    stats = ClassificationStats(
        total=total,
        accepted=len(results),
        by_resolved_by=dict(Counter(r.resolved_by for r in results)),
    )
    elapsed_ms = int((time.perf_counter() - start_time) * 1000)
    logger.info(
        "Classification complete: %d/%d accepted in %dms, tiers=%s",
        stats.accepted,
        stats.total,
        elapsed_ms,
        stats.by_resolved_by,
    )

    return ClassifyBatchResponse(results=results, stats=stats, processing_time_ms=elapsed_ms)


@router.post("/classify/realtime", response_model=ClassifyRealtimeResponse)
async def classify_realtime(
    request: ClassifyRealtimeRequest,
    classifier: RealtimeDep,
) -> ClassifyRealtimeResponse:
    """Classify one message using only the pattern cache and rules."""
    result = await classifier.classify(request.message)
    return ClassifyRealtimeResponse(result=result, is_payment=result is not None)
