"""Records shared between the catalog, selection and stats layers."""

from dataclasses import dataclass
from typing import Optional, Tuple

MODE_BALANCED = "balanced"
MODE_RAW = "raw"
MODES = [MODE_BALANCED, MODE_RAW]
DEFAULT_MODE = MODE_BALANCED

LAYOUT_RANGES = "ranges"
LAYOUT_EXACT = "exact"
LAYOUTS = [LAYOUT_RANGES, LAYOUT_EXACT]
DEFAULT_LAYOUT = LAYOUT_RANGES


@dataclass(frozen=True)
class MetaRecord:
    id: int
    year: Optional[int] = None
    tags: Tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {"appid": self.id, "year": self.year, "tags": list(self.tags)}


@dataclass(frozen=True)
class LifetimeStats:
    total: int = 0
    correct: int = 0

    @property
    def accuracy(self) -> float:
        """Fraction of correct guesses, 0.0 when nothing has been played."""
        if not self.total:
            return 0.0
        return self.correct / self.total

    def __str__(self) -> str:
        return f"{self.correct}/{self.total}"


@dataclass(frozen=True)
class RoundResult:
    streak: int
    lifetime: LifetimeStats
