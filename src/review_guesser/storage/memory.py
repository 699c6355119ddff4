"""In-process storage, lost when the process (the session) ends."""

from typing import Dict, MutableMapping, Optional

from review_guesser.storage.base import KeyValueStorage


class MemoryStorage(KeyValueStorage):
    def __init__(self, data: Optional[MutableMapping[str, str]] = None):
        self._data: MutableMapping[str, str] = {} if data is None else data

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def snapshot(self) -> Dict[str, str]:
        return dict(self._data)
