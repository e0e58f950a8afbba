from .ollama import OllamaSmsExtractor
from .port import LlmExtractor
from .regex_validation import RegexValidation, validate_regex_triple

__all__ = [
    "LlmExtractor",
    "OllamaSmsExtractor",
    "RegexValidation",
    "validate_regex_triple",
]
