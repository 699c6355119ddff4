"""Long-lived storage kept as a single JSON object on disk."""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional

from review_guesser.storage.base import KeyValueStorage

logger = logging.getLogger(__name__)


class JsonFileStorage(KeyValueStorage):
    """Each call re-reads the file, so edits made outside the process are seen.

    Reads raise on I/O errors or a file that isn't a JSON object; wrap it in
    ``SafeStorage`` where callers must not see those. Writes replace a
    corrupt file instead of failing on it.
    """

    def __init__(self, path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str) -> Optional[str]:
        value = self._load().get(key)
        return None if value is None else str(value)

    def set(self, key: str, value: str) -> None:
        self.set_many({key: value})

    def set_many(self, items: Dict[str, str]) -> None:
        data = self._load_for_write()
        data.update((key, str(value)) for key, value in items.items())
        self._dump(data)

    def remove(self, key: str) -> None:
        data = self._load_for_write()
        if key in data:
            del data[key]
            self._dump(data)

    def _load(self) -> Dict[str, object]:
        try:
            with open(self._path, encoding="utf-8") as fh:
                data = json.load(fh)
        except FileNotFoundError:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object in {self._path}")
        return data

    def _load_for_write(self) -> Dict[str, object]:
        try:
            return self._load()
        except ValueError:
            logger.warning("Discarding corrupt state file %s", self._path, exc_info=True)
            return {}

    def _dump(self, data: Dict[str, object]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self._path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2, sort_keys=True)
            os.replace(tmp_path, self._path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
