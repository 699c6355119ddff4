"""Load game metadata catalogs (appid,year,tags CSV files) and memoize them."""

import logging
import re
import threading
from concurrent.futures import Executor, Future
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple
from urllib.parse import urljoin

import requests

from review_guesser.models import MetaRecord

logger = logging.getLogger(__name__)

RELEASED_SOURCE = "data/released_appids.csv"
BATCH_SOURCES = [
    "data/Batch_1.csv",
    "data/Batch_2.csv",
    "data/Batch_3.csv",
    "data/Batch_4.csv",
    "data/Batch_5.csv",
    "data/Batch_6.csv",
]

_LINE_BREAK = re.compile(r"\r?\n")
_NON_ALNUM = re.compile(r"[^a-z0-9]")
_INTEGER = re.compile(r"[+-]?[0-9]+")

Catalog = Tuple[MetaRecord, ...]


def normalize_tag(value) -> str:
    """Lowercase a tag and drop everything that isn't a-z or 0-9."""
    return _NON_ALNUM.sub("", str(value or "").lower())


def parse_meta_csv(text: str) -> List[MetaRecord]:
    """Parse catalog text into records, skipping rows that don't fit.

    Each data row is ``id,year,tags`` where tags are ``;``-separated. A header
    row is only recognised on the very first line. Rows without a positive
    integer id are dropped; a repeated id keeps its first row.
    """
    records: List[MetaRecord] = []
    seen = set()

    for index, raw_line in enumerate(_LINE_BREAK.split(text)):
        line = raw_line.strip()
        if not line:
            continue
        if index == 0 and _looks_like_header(line):
            continue

        parts = line.split(",")
        app_id = _parse_int(parts[0])
        if app_id is None or app_id <= 0 or app_id in seen:
            continue

        year = _parse_int(parts[1]) if len(parts) > 1 else None

        tags: Tuple[str, ...] = ()
        if len(parts) > 2 and parts[2].strip():
            normalized = (normalize_tag(t) for t in parts[2].split(";"))
            tags = tuple(t for t in normalized if t)

        seen.add(app_id)
        records.append(MetaRecord(id=app_id, year=year, tags=tags))

    return records


def _parse_int(value: str) -> Optional[int]:
    value = value.strip()
    if not _INTEGER.fullmatch(value):
        return None
    return int(value)


def _looks_like_header(line: str) -> bool:
    if _parse_int(line.split(",")[0]) is not None:
        return False
    lowered = line.lower()
    return "id" in lowered and "year" in lowered


def _is_url(location: str) -> bool:
    return location.lower().startswith(("http://", "https://"))


class CatalogCache:
    """Source id -> future of its parsed catalog.

    Entries are created once and never evicted. The first caller to claim a
    source owns the fetch; everyone else shares its future.
    """

    def __init__(self):
        self._entries: Dict[str, Future] = {}
        self._lock = threading.Lock()

    def claim(self, source_id: str) -> Tuple[Future, bool]:
        """Return ``(future, is_owner)`` for ``source_id``."""
        with self._lock:
            future = self._entries.get(source_id)
            if future is not None:
                return future, False
            future = Future()
            # Running futures can't be cancelled by the callers sharing them.
            future.set_running_or_notify_cancel()
            self._entries[source_id] = future
            return future, True

    def __contains__(self, source_id: str) -> bool:
        with self._lock:
            return source_id in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class CatalogLoader:
    def __init__(
        self,
        session: Optional[requests.Session] = None,
        data_dir: str = ".",
        base_url: Optional[str] = None,
        timeout: float = 30.0,
        cache: Optional[CatalogCache] = None,
        executor: Optional[Executor] = None,
    ):
        self._session = session or requests.Session()
        self._data_dir = Path(data_dir)
        self._base_url = base_url
        self._timeout = timeout
        self._cache = cache if cache is not None else CatalogCache()
        self._executor = executor

    @property
    def cache(self) -> CatalogCache:
        return self._cache

    def resolve_location(self, source_id: str) -> str:
        """Turn a source id into a URL or a filesystem path."""
        if _is_url(source_id):
            return source_id
        if self._base_url:
            return urljoin(self._base_url.rstrip("/") + "/", source_id.lstrip("/"))
        return str(self._data_dir / source_id)

    def load_async(self, source_id: str) -> Future:
        """Return the shared future for ``source_id``, starting the fetch if needed.

        The future always resolves to a tuple of records, empty on failure.
        """
        future, is_owner = self._cache.claim(source_id)
        if is_owner:
            self._start(source_id, future)
        return future

    def close(self) -> None:
        """Stop the background executor; later loads run inline."""
        executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=False)

    def load(self, source_id: str) -> Catalog:
        return self.load_async(source_id).result()

    def prefetch(self, source_ids: Iterable[str]) -> List[Future]:
        return [self.load_async(source_id) for source_id in source_ids]

    def released_ids(self, source_id: str = RELEASED_SOURCE) -> List[int]:
        return [record.id for record in self.load(source_id)]

    def _start(self, source_id: str, future: Future) -> None:
        executor = self._executor
        if executor is not None:
            try:
                executor.submit(self._resolve, source_id, future)
                return
            except Exception:
                logger.warning("Executor unavailable, loading %s inline", source_id, exc_info=True)
        self._resolve(source_id, future)

    def _resolve(self, source_id: str, future: Future) -> None:
        try:
            records = self._fetch_and_parse(source_id)
        except Exception:
            logger.warning("Unexpected error loading catalog %s", source_id, exc_info=True)
            records = ()
        future.set_result(records)

    def _fetch_and_parse(self, source_id: str) -> Catalog:
        location = self.resolve_location(source_id)
        try:
            payload = self._read(location)
        except Exception:
            logger.warning("Failed to fetch catalog %s (%s)", source_id, location, exc_info=True)
            return ()

        try:
            records = parse_meta_csv(payload.decode("utf-8-sig"))
        except Exception:
            logger.warning("Failed to parse catalog %s", source_id, exc_info=True)
            return ()

        logger.debug("Loaded %d records from %s", len(records), source_id)
        return tuple(records)

    def _read(self, location: str) -> bytes:
        if _is_url(location):
            resp = self._session.get(location, timeout=self._timeout)
            resp.raise_for_status()
            return resp.content
        return Path(location).read_bytes()
