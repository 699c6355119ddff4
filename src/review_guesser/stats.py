"""Guess-streak and lifetime counters on top of two storage scopes."""

import logging
import math
from typing import Dict, Optional

from review_guesser.models import LifetimeStats, RoundResult
from review_guesser.storage import KeyValueStorage, MemoryStorage, make_safe

logger = logging.getLogger(__name__)

STREAK_KEY = "reviewGuesserCurrentStreak"
LIFETIME_TOTAL_KEY = "reviewGuesserLifetimeTotal"
LIFETIME_CORRECT_KEY = "reviewGuesserLifetimeCorrect"
_LIFETIME_KEYS = (LIFETIME_TOTAL_KEY, LIFETIME_CORRECT_KEY)


def to_count(value) -> int:
    """Coerce a stored value to a non-negative int, truncating fractions.

    Anything unparseable (None, "", "abc", NaN) becomes 0.
    """
    if isinstance(value, int):
        return max(0, value)
    text = "" if value is None else str(value).strip()
    try:
        return max(0, int(text))
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return 0
    if not math.isfinite(number):
        return 0
    return max(0, int(number))


def clamp_lifetime(correct, total) -> LifetimeStats:
    safe_total = to_count(total)
    safe_correct = min(safe_total, to_count(correct))
    return LifetimeStats(total=safe_total, correct=safe_correct)


def _lifetime_items(stats: LifetimeStats) -> Dict[str, str]:
    return {LIFETIME_TOTAL_KEY: str(stats.total), LIFETIME_CORRECT_KEY: str(stats.correct)}


class StatsStore:
    def __init__(
        self,
        session_storage: Optional[KeyValueStorage] = None,
        persistent_storage: Optional[KeyValueStorage] = None,
    ):
        self._session = make_safe(session_storage or MemoryStorage())
        self._persistent = make_safe(persistent_storage or MemoryStorage())

    def get_streak(self) -> int:
        return to_count(self._session.get(STREAK_KEY))

    def set_streak(self, value) -> int:
        streak = to_count(value)
        self._session.set(STREAK_KEY, str(streak))
        return streak

    def get_lifetime(self) -> LifetimeStats:
        return clamp_lifetime(
            self._persistent.get(LIFETIME_CORRECT_KEY),
            self._persistent.get(LIFETIME_TOTAL_KEY),
        )

    def set_lifetime(self, correct, total) -> LifetimeStats:
        stats = clamp_lifetime(correct, total)
        self._persistent.set_many(_lifetime_items(stats))
        return stats

    def record_outcome(self, is_correct: bool) -> RoundResult:
        """Apply one finished round to the streak and the lifetime counters."""
        streak = self.get_streak() + 1 if is_correct else 0
        current = self.get_lifetime()
        lifetime = clamp_lifetime(
            current.correct + (1 if is_correct else 0),
            current.total + 1,
        )

        # Lifetime and streak live in different backends: undo the lifetime
        # write if the streak can't be saved, so reads never see half a round.
        previous = {key: self._persistent.get(key) for key in _LIFETIME_KEYS}
        if self._persistent.set_many(_lifetime_items(lifetime)):
            if not self._session.set(STREAK_KEY, str(streak)):
                self._restore_lifetime(previous)

        logger.debug("Round recorded: correct=%s streak=%d lifetime=%s", is_correct, streak, lifetime)
        return RoundResult(streak=streak, lifetime=lifetime)

    def _restore_lifetime(self, previous: Dict[str, Optional[str]]) -> None:
        kept = {key: value for key, value in previous.items() if value is not None}
        if kept:
            self._persistent.set_many(kept)
        for key, value in previous.items():
            if value is None:
                self._persistent.remove(key)

    def clear_lifetime(self) -> LifetimeStats:
        self._persistent.remove(LIFETIME_TOTAL_KEY)
        self._persistent.remove(LIFETIME_CORRECT_KEY)
        return LifetimeStats()
