"""FastAPI dependencies."""

from typing import Annotated

from fastapi import Depends, Request

from paysms_ml.pipeline import BatchPipeline
from paysms_ml.realtime import RealtimeClassifier


def get_batch_pipeline(request: Request) -> BatchPipeline:
    return request.app.state.batch_pipeline


def get_realtime_classifier(request: Request) -> RealtimeClassifier:
    return request.app.state.realtime


BatchPipelineDep = Annotated[BatchPipeline, Depends(get_batch_pipeline)]
RealtimeDep = Annotated[RealtimeClassifier, Depends(get_realtime_classifier)]
