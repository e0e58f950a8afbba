"""Request and response models of the HTTP API."""

from pydantic import BaseModel, Field

from paysms_ml.data_models import ClassifiedMessage, Message


class HealthResponse(BaseModel):
    status: str
    version: str
    encoder_loaded: bool
    encoder_model_name: str
    llm_enabled: bool


class ClassifyBatchRequest(BaseModel):
    messages: list[Message]
    max_count: int | None = Field(default=None, ge=0)


class ClassificationStats(BaseModel):
    total: int
    accepted: int
    by_resolved_by: dict[str, int]


class ClassifyBatchResponse(BaseModel):
    results: list[ClassifiedMessage]
    stats: ClassificationStats
    processing_time_ms: int


class ClassifyRealtimeRequest(BaseModel):
    message: Message


class ClassifyRealtimeResponse(BaseModel):
    result: ClassifiedMessage | None
    is_payment: bool


class CleanupResponse(BaseModel):
    deleted: int
