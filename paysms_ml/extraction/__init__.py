"""Field extraction with learned or derived regexes."""

from .regex_extractor import RegexExtractor, is_valid_card_candidate, is_valid_store_candidate
from .template_fallback import build_template_fallback_regex

__all__ = [
    "RegexExtractor",
    "build_template_fallback_regex",
    "is_valid_card_candidate",
    "is_valid_store_candidate",
]
