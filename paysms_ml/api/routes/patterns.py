"""Pattern maintenance endpoints."""

import logging

from fastapi import APIRouter, HTTPException, status

from paysms_ml.api.dependencies import BatchPipelineDep
from paysms_ml.api.schemas import CleanupResponse
from paysms_ml.exceptions import StorageError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/patterns/cleanup", response_model=CleanupResponse)
async def cleanup_patterns(pipeline: BatchPipelineDep) -> CleanupResponse:
    """Delete stale patterns."""
    try:
        deleted = await pipeline.cleanup_stale_patterns()
    except StorageError as e:
        logger.exception("Failed to clean up stale patterns: %s", e)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Pattern store unavailable",
        ) from e
    logger.info("POST /patterns/cleanup: deleted=%d", deleted)
    return CleanupResponse(deleted=deleted)
