"""Wrapper that turns any storage backend into a non-throwing one."""

import logging
from typing import Dict, Optional

from review_guesser.storage.base import KeyValueStorage

logger = logging.getLogger(__name__)


class SafeStorage(KeyValueStorage):
    """Swallow backend errors: failed reads return None, failed writes are dropped.

    Writes return True when the backend accepted them.
    """

    def __init__(self, backend: KeyValueStorage):
        self._backend = backend

    @property
    def backend(self) -> KeyValueStorage:
        return self._backend

    def get(self, key: str) -> Optional[str]:
        try:
            value = self._backend.get(key)
        except Exception:
            logger.debug("Storage read failed for %s", key, exc_info=True)
            return None
        return None if value is None else str(value)

    def set(self, key: str, value: str) -> bool:
        try:
            self._backend.set(key, value)
        except Exception:
            logger.debug("Storage write failed for %s", key, exc_info=True)
            return False
        return True

    def set_many(self, items: Dict[str, str]) -> bool:
        try:
            self._backend.set_many(items)
        except Exception:
            logger.debug("Storage write failed for %s", list(items), exc_info=True)
            return False
        return True

    def remove(self, key: str) -> bool:
        try:
            self._backend.remove(key)
        except Exception:
            logger.debug("Storage remove failed for %s", key, exc_info=True)
            return False
        return True


def make_safe(backend: KeyValueStorage) -> SafeStorage:
    if isinstance(backend, SafeStorage):
        return backend
    return SafeStorage(backend)
