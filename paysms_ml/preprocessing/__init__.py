"""Text preprocessing for SMS bodies."""

from .address import normalize_address
from .category import infer_category, normalize_category
from .heuristics import SmsFieldParser
from .prefilter import PreFilter
from .template import templateize

__all__ = [
    "PreFilter",
    "SmsFieldParser",
    "infer_category",
    "normalize_address",
    "normalize_category",
    "templateize",
]
