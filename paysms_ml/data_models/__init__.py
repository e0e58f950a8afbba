from .analysis import AnalysisResult, ClassifiedMessage, ResolvedBy
from .extraction import ExtractionResult, RegexTriple
from .message import Message
from .pattern import CONFIDENCE_BY_SOURCE, ParseSource, Pattern

__all__ = [
    "CONFIDENCE_BY_SOURCE",
    "AnalysisResult",
    "ClassifiedMessage",
    "ExtractionResult",
    "Message",
    "ParseSource",
    "Pattern",
    "RegexTriple",
    "ResolvedBy",
]
