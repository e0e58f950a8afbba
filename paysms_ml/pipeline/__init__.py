from .context import Cluster, EmbeddedMessage, MainCaseContext, ProgressCallback, SourceGroup
from .failure_tracker import RegexFailureState, RegexFailureTracker
from .orchestrator import BatchPipeline

__all__ = [
    "BatchPipeline",
    "Cluster",
    "EmbeddedMessage",
    "MainCaseContext",
    "ProgressCallback",
    "RegexFailureState",
    "RegexFailureTracker",
    "SourceGroup",
]
