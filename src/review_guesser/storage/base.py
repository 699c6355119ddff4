"""Abstract base class for key/value storage backends."""

from abc import ABC, abstractmethod
from typing import Dict, Optional


class KeyValueStorage(ABC):
    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored string for ``key``, or None if absent."""
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete ``key``; removing a missing key is not an error."""
        ...

    def set_many(self, items: Dict[str, str]) -> None:
        """Write every item or none of them.

        Backends that can't write in one step restore the keys already
        written before re-raising.
        """
        previous = {key: self.get(key) for key in items}
        written = []
        try:
            for key, value in items.items():
                self.set(key, value)
                written.append(key)
        except Exception:
            for key in written:
                if previous[key] is None:
                    self.remove(key)
                else:
                    self.set(key, previous[key])
            raise
