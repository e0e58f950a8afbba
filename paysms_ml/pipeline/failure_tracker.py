"""Per-template regex generation failure tracking with cooldown."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegexFailureState:
    fail_count: int
    last_failed_at: float


class RegexFailureTracker:
    """Skips regex generation for templates that keep failing.

    After ``threshold`` failures, generation for the template is skipped
    until ``cooldown_seconds`` have passed since the last failure. A failure
    recorded after the window starts a new count; a success clears it.
    State lives in process memory only.
    """

    def __init__(
        self,
        threshold: int = 2,
        cooldown_seconds: float = 30 * 60,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._threshold = threshold
        self._cooldown = cooldown_seconds
        self._clock = clock
        self._states: dict[str, RegexFailureState] = {}
        self._lock = asyncio.Lock()

    async def should_skip(self, template: str) -> bool:
        async with self._lock:
            state = self._states.get(template)
            if state is None or state.fail_count < self._threshold:
                return False
            return self._clock() - state.last_failed_at < self._cooldown

    async def record_failure(self, template: str) -> int:
        """Record a failure and return the template's current count."""
        async with self._lock:
            now = self._clock()
            state = self._states.get(template)
            if state is None or now - state.last_failed_at >= self._cooldown:
                count = 1
            else:
                count = state.fail_count + 1
            self._states[template] = RegexFailureState(fail_count=count, last_failed_at=now)

        if count >= self._threshold:
            logger.info(
                "Regex generation failed %d times, cooling down for %.0fs: %s",
                count,
                self._cooldown,
                template[:60],
            )
        return count

    async def clear_failure(self, template: str) -> None:
        async with self._lock:
            self._states.pop(template, None)
