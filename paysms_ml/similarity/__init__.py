"""Threshold profiles and the decisions derived from them."""

from .policy import SimilarityPolicy, SmsPatternPolicy
from .profile import SimilarityProfile

__all__ = ["SimilarityPolicy", "SimilarityProfile", "SmsPatternPolicy"]
