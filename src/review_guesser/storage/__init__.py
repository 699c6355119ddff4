"""Storage backends; the stats and preference stores only see ``KeyValueStorage``."""

from review_guesser.storage.base import KeyValueStorage
from review_guesser.storage.json_file import JsonFileStorage
from review_guesser.storage.memory import MemoryStorage
from review_guesser.storage.safe import SafeStorage, make_safe

__all__ = [
    "KeyValueStorage",
    "JsonFileStorage",
    "MemoryStorage",
    "SafeStorage",
    "make_safe",
]
