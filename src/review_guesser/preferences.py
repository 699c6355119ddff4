"""Persisted user choices: next-game selection mode and guess layout."""

from typing import Optional

from review_guesser.models import DEFAULT_LAYOUT, DEFAULT_MODE, LAYOUTS, MODES
from review_guesser.storage import KeyValueStorage, MemoryStorage, make_safe

MODE_KEY = "reviewGuesserNextMode"
LAYOUT_KEY = "reviewGuesserGuessLayout"


def coerce_mode(value) -> str:
    return value if value in MODES else DEFAULT_MODE


def coerce_layout(value) -> str:
    return value if value in LAYOUTS else DEFAULT_LAYOUT


class PreferenceStore:
    def __init__(self, storage: Optional[KeyValueStorage] = None):
        self._storage = make_safe(storage or MemoryStorage())

    def get_mode(self) -> str:
        return coerce_mode(self._storage.get(MODE_KEY))

    def set_mode(self, value) -> str:
        mode = coerce_mode(value)
        self._storage.set(MODE_KEY, mode)
        return mode

    def get_layout(self) -> str:
        return coerce_layout(self._storage.get(LAYOUT_KEY))

    def set_layout(self, value) -> str:
        layout = coerce_layout(value)
        self._storage.set(LAYOUT_KEY, layout)
        return layout
