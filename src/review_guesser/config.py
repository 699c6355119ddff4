"""Runtime settings, read from ``REVIEW_GUESSER_*`` environment variables."""

import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import List, Mapping, Optional

from review_guesser.catalog import BATCH_SOURCES, RELEASED_SOURCE

logger = logging.getLogger(__name__)

ENV_PREFIX = "REVIEW_GUESSER_"
STORE_APP_URL = "https://store.steampowered.com/app/{app_id}/"
DEFAULT_APP_ID = 570
DEFAULT_TIMEOUT = 30.0
DEFAULT_STATE_DIR = Path.home() / ".review_guesser"


@dataclass
class Settings:
    data_dir: str = "."
    data_url: Optional[str] = None
    state_dir: Path = DEFAULT_STATE_DIR
    timeout: float = DEFAULT_TIMEOUT
    fetch_workers: int = 4
    default_app_id: int = DEFAULT_APP_ID
    released_source: str = RELEASED_SOURCE
    shard_sources: List[str] = field(default_factory=lambda: list(BATCH_SOURCES))

    @property
    def state_file(self) -> Path:
        return Path(self.state_dir) / "state.json"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        settings = cls()
        return replace(
            settings,
            data_dir=env.get(ENV_PREFIX + "DATA_DIR") or settings.data_dir,
            data_url=env.get(ENV_PREFIX + "DATA_URL") or None,
            state_dir=Path(env.get(ENV_PREFIX + "STATE_DIR") or settings.state_dir).expanduser(),
            timeout=_positive_float(env.get(ENV_PREFIX + "TIMEOUT"), settings.timeout),
        )

    def override(self, **values) -> "Settings":
        """Copy with every non-None keyword applied (CLI flags win over env)."""
        changes = {k: v for k, v in values.items() if v is not None}
        return replace(self, **changes)


def _positive_float(raw: Optional[str], default: float) -> float:
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring invalid timeout %r, using %s", raw, default)
        return default
    return value if value > 0 else default
