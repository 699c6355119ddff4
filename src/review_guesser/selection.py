"""Choose the next game from the released catalog or a random batch shard."""

import logging
import random
from typing import Callable, List, Optional, Sequence, TypeVar

from review_guesser.catalog import BATCH_SOURCES, RELEASED_SOURCE, Catalog, CatalogLoader
from review_guesser.models import MODE_RAW, MetaRecord

logger = logging.getLogger(__name__)

T = TypeVar("T")

RandomSource = Callable[[], float]


def pick_random_item(items: Sequence[T], rng: RandomSource = random.random) -> Optional[T]:
    """Return a uniformly chosen item, or None for an empty sequence."""
    if not items:
        return None
    index = int(rng() * len(items))
    return items[min(index, len(items) - 1)]


class SelectionPolicy:
    def __init__(
        self,
        loader: CatalogLoader,
        released_source: str = RELEASED_SOURCE,
        shard_sources: Optional[List[str]] = None,
        rng: RandomSource = random.random,
    ):
        self._loader = loader
        self._released_source = released_source
        self._shard_sources = list(BATCH_SOURCES if shard_sources is None else shard_sources)
        self._rng = rng

    @property
    def loader(self) -> CatalogLoader:
        return self._loader

    @property
    def shard_sources(self) -> List[str]:
        return list(self._shard_sources)

    def released_pool(self) -> Catalog:
        return self._loader.load(self._released_source)

    def released_ids(self) -> List[int]:
        return self._loader.released_ids(self._released_source)

    def shard_pool(self) -> Catalog:
        """Load one shard chosen uniformly at random (empty if there are none)."""
        source = pick_random_item(self._shard_sources, self._rng)
        if source is None:
            return ()
        logger.debug("Sampling from shard %s", source)
        return self._loader.load(source)

    def pool_for(self, mode: str) -> Catalog:
        if mode == MODE_RAW:
            return self.released_pool()

        pool = self.shard_pool()
        if not pool:
            logger.info("Shard pool empty, falling back to released catalog")
            pool = self.released_pool()
        return pool

    def pick_target(self, mode: str) -> Optional[MetaRecord]:
        """Pick a record for ``mode``; anything but ``raw`` samples a shard."""
        return pick_random_item(self.pool_for(mode), self._rng)
