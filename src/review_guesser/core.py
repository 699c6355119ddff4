"""Orchestrator: wires the catalog, selection, stats and preference layers."""

import logging
import random
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional

import requests

from review_guesser.catalog import CatalogLoader
from review_guesser.config import STORE_APP_URL, Settings
from review_guesser.models import LifetimeStats, RoundResult
from review_guesser.preferences import PreferenceStore
from review_guesser.selection import RandomSource, SelectionPolicy
from review_guesser.stats import StatsStore
from review_guesser.storage import JsonFileStorage, KeyValueStorage, MemoryStorage

logger = logging.getLogger(__name__)

Navigator = Callable[[int], None]


def store_url(app_id: int) -> str:
    return STORE_APP_URL.format(app_id=app_id)


def build_policy(settings: Settings, rng: Optional[RandomSource] = None) -> SelectionPolicy:
    """Selection policy over a background-loading, memoizing catalog loader."""
    http = requests.Session()
    http.headers.update({"User-Agent": "review-guesser/0.1.0"})
    executor = ThreadPoolExecutor(
        max_workers=settings.fetch_workers, thread_name_prefix="catalog"
    )
    loader = CatalogLoader(
        session=http,
        data_dir=settings.data_dir,
        base_url=settings.data_url,
        timeout=settings.timeout,
        executor=executor,
    )
    return SelectionPolicy(
        loader,
        released_source=settings.released_source,
        shard_sources=settings.shard_sources,
        rng=rng or random.random,
    )


class ReviewGuesser:
    def __init__(
        self,
        policy: SelectionPolicy,
        stats: StatsStore,
        preferences: PreferenceStore,
        navigate: Optional[Navigator] = None,
        default_app_id: int = 570,
    ):
        self.policy = policy
        self.stats = stats
        self.preferences = preferences
        self._navigate = navigate
        self._default_app_id = default_app_id
        self._owns_loader = False

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        session_storage: Optional[KeyValueStorage] = None,
        persistent_storage: Optional[KeyValueStorage] = None,
        navigate: Optional[Navigator] = None,
        rng: Optional[RandomSource] = None,
        policy: Optional[SelectionPolicy] = None,
    ) -> "ReviewGuesser":
        """Build a guesser from settings.

        Pass a shared ``policy`` (see ``build_policy``) to reuse one catalog
        cache across guessers; the guesser then leaves its loader open on close.
        """
        owns_loader = policy is None
        if policy is None:
            policy = build_policy(settings, rng)
        persistent = persistent_storage or JsonFileStorage(settings.state_file)
        guesser = cls(
            policy,
            StatsStore(session_storage or MemoryStorage(), persistent),
            PreferenceStore(persistent),
            navigate=navigate,
            default_app_id=settings.default_app_id,
        )
        guesser._owns_loader = owns_loader
        return guesser

    def next_app_id(self, mode: Optional[str] = None) -> int:
        """Pick the next game's app id, or the default app if every pool is empty."""
        mode = mode or self.preferences.get_mode()
        chosen = self.policy.pick_target(mode)
        if chosen is None:
            logger.warning("No catalog records available (mode=%s); using app %d", mode, self._default_app_id)
            return self._default_app_id

        logger.info("Next game: %s", chosen.to_dict())
        return chosen.id

    def go_next(self, mode: Optional[str] = None) -> int:
        app_id = self.next_app_id(mode)
        if self._navigate is not None:
            self._navigate(app_id)
        return app_id

    def record_outcome(self, is_correct: bool) -> RoundResult:
        return self.stats.record_outcome(is_correct)

    def clear_lifetime(self) -> LifetimeStats:
        return self.stats.clear_lifetime()

    def close(self) -> None:
        if self._owns_loader:
            self.policy.loader.close()
            self._owns_loader = False

    def __enter__(self) -> "ReviewGuesser":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
