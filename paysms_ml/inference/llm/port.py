"""LLM extractor port."""

from typing import Protocol

from paysms_ml.data_models import ExtractionResult, RegexTriple


class LlmExtractor(Protocol):
    """Judges messages and synthesizes extraction regexes.

    Implementations never raise for transport or parse failures; they
    return None in the affected positions instead.
    """

    async def extract_batch(
        self,
        bodies: list[str],
        timestamps: list[int],
    ) -> list[ExtractionResult | None]:
        """One result per body, in input order."""
        ...

    async def generate_regex_for_group(
        self,
        sample_bodies: list[str],
        sample_timestamps: list[int],
    ) -> RegexTriple | None:
        """A validated regex triple common to all samples, or None."""
        ...
