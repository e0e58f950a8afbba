"""Storage layer protocols."""

from datetime import datetime
from typing import Protocol

from paysms_ml.data_models import Pattern


class PatternStore(Protocol):
    """CRUD contract for learned SMS patterns.

    The store is authoritative; callers must not assume any in-memory
    coherence across process restarts.
    """

    async def get_all_payment_patterns(self) -> list[Pattern]:
        """Return every pattern with is_payment=True, in insertion order."""
        ...

    async def get_all_non_payment_patterns(self) -> list[Pattern]:
        """Return every pattern with is_payment=False, in insertion order."""
        ...

    async def insert(self, pattern: Pattern) -> int:
        """Persist a pattern and return its id."""
        ...

    async def increment_match_count(self, pattern_id: int, matched_at: datetime) -> None:
        """Increment match_count and set last_matched_at."""
        ...

    async def delete_stale(self, max_match_count: int, older_than: datetime) -> int:
        """Delete patterns matched at most max_match_count times and not since older_than."""
        ...
