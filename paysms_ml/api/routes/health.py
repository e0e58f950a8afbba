"""Health check endpoint."""

from fastapi import APIRouter, Request

from paysms_ml import __version__
from paysms_ml.api.schemas import HealthResponse
from paysms_ml.config.settings import get_settings

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Check service health and model status."""
    settings = get_settings()
    infra = getattr(request.app.state, "infra", None)

    encoder_loaded = infra is not None
    return HealthResponse(
        status="ok" if encoder_loaded else "degraded",
        version=__version__,
        encoder_loaded=encoder_loaded,
        encoder_model_name=infra.encoder.model_name if infra else settings.encoder_model,
        llm_enabled=bool(infra and infra.llm is not None),
    )
