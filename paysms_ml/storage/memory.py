"""In-process pattern store."""

from datetime import datetime

from paysms_ml.data_models import Pattern


class InMemoryPatternStore:
    """Pattern store backed by a dict; used by tests and the real-time path
    when no database is configured."""

    def __init__(self, patterns: list[Pattern] | None = None):
        self._patterns: dict[int, Pattern] = {}
        self._next_id = 1
        for pattern in patterns or []:
            self._add(pattern)

    def __len__(self) -> int:
        return len(self._patterns)

    def _add(self, pattern: Pattern) -> int:
        pattern_id = self._next_id
        self._next_id += 1
        self._patterns[pattern_id] = pattern.model_copy(update={"id": pattern_id})
        return pattern_id

    def get(self, pattern_id: int) -> Pattern | None:
        return self._patterns.get(pattern_id)

    async def get_all_payment_patterns(self) -> list[Pattern]:
        return [p for p in self._patterns.values() if p.is_payment]

    async def get_all_non_payment_patterns(self) -> list[Pattern]:
        return [p for p in self._patterns.values() if not p.is_payment]

    async def insert(self, pattern: Pattern) -> int:
        return self._add(pattern)

    async def increment_match_count(self, pattern_id: int, matched_at: datetime) -> None:
        pattern = self._patterns.get(pattern_id)
        if pattern is None:
            return
        self._patterns[pattern_id] = pattern.model_copy(
            update={"match_count": pattern.match_count + 1, "last_matched_at": matched_at}
        )

    async def delete_stale(self, max_match_count: int, older_than: datetime) -> int:
        stale = [
            pid
            for pid, p in self._patterns.items()
            if p.match_count <= max_match_count and p.last_matched_at < older_than
        ]
        for pid in stale:
            del self._patterns[pid]
        return len(stale)
