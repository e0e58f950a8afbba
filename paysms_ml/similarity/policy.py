"""Similarity decisions for a given profile."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .profile import SimilarityProfile

if TYPE_CHECKING:
    from paysms_ml.config.settings import Settings


class SimilarityPolicy:
    """Maps a similarity score to the action classes of a profile."""

    def __init__(self, profile: SimilarityProfile):
        self.profile = profile

    def should_auto_apply(self, similarity: float) -> bool:
        """Reuse a cached result with full trust."""
        return similarity >= self.profile.auto_apply

    def should_confirm(self, similarity: float) -> bool:
        """Treat the match as positive for the domain's core judgment."""
        return similarity >= self.profile.confirm

    def should_propagate(self, similarity: float) -> bool:
        return self.profile.propagate > 0 and similarity >= self.profile.propagate

    def should_group(self, similarity: float) -> bool:
        return self.profile.group > 0 and similarity >= self.profile.group

    def should_reject(self, similarity: float) -> bool:
        return self.profile.reject > 0 and similarity <= self.profile.reject


class SmsPatternPolicy(SimilarityPolicy):
    """Policy for matching SMS templates against learned patterns.

    Adds non-payment matching on top of the profile, which needs a stricter
    bar than payment matching.
    """

    def __init__(
        self,
        profile: SimilarityProfile | None = None,
        non_payment_threshold: float = 0.97,
    ):
        super().__init__(profile or SimilarityProfile(auto_apply=0.95, confirm=0.92, group=0.95))
        self.non_payment_threshold = non_payment_threshold

    @classmethod
    def from_settings(cls, settings: Settings) -> SmsPatternPolicy:
        """Build the SMS policy from configured thresholds."""
        profile = SimilarityProfile(
            auto_apply=settings.auto_apply_threshold,
            confirm=settings.confirm_threshold,
            group=settings.group_threshold,
        )
        return cls(
            profile,
            non_payment_threshold=settings.non_payment_threshold,
        )

    def should_match_non_payment(self, similarity: float) -> bool:
        return similarity >= self.non_payment_threshold
