from .collector import SampleCollector, sample_key
from .masking import mask_sms_body
from .uploader import HttpSampleUploader, TelemetrySample, TelemetryUploader

__all__ = [
    "HttpSampleUploader",
    "SampleCollector",
    "TelemetrySample",
    "TelemetryUploader",
    "mask_sms_body",
    "sample_key",
]
