"""Shared fixtures for review-guesser tests."""

import pytest
import requests

from review_guesser.catalog import CatalogLoader
from review_guesser.storage import KeyValueStorage, MemoryStorage


RELEASED_CSV = """\
AppID,Year,Tags
440,2007,Action;FPS;Free to Play
570,2013,MOBA;Strategy
730,2012,FPS;Competitive
"""

BATCH_1_CSV = """\
AppID,Year,Tags
1091500,2020,Open World;RPG
1245620,2022,Souls-like;Open World
"""

BATCH_2_CSV = """\
AppID,Year,Tags
292030,2015,RPG;Story Rich
"""


class BrokenStorage(KeyValueStorage):
    """Backend that fails every call, like disabled browser storage."""

    def get(self, key):
        raise OSError("storage disabled")

    def set(self, key, value):
        raise OSError("quota exceeded")

    def remove(self, key):
        raise OSError("storage disabled")


class FailingKeyStorage(MemoryStorage):
    """Memory backend whose writes to one key always fail."""

    def __init__(self, data=None, fail_on=None):
        super().__init__(data)
        self.fail_on = fail_on

    def set(self, key, value):
        if key == self.fail_on:
            raise OSError(f"cannot write {key}")
        super().set(key, value)


class ManualExecutor:
    """Executor that queues work until ``run_all`` is called."""

    def __init__(self):
        self.pending = []

    def submit(self, fn, *args, **kwargs):
        self.pending.append((fn, args, kwargs))

    def run_all(self):
        while self.pending:
            fn, args, kwargs = self.pending.pop(0)
            fn(*args, **kwargs)


def _sequence_rng(*values):
    it = iter(values)
    return lambda: next(it)


@pytest.fixture
def make_rng():
    """Factory for random sources that return the given values in order."""
    return _sequence_rng


@pytest.fixture
def failing_storage():
    return FailingKeyStorage


@pytest.fixture
def manual_executor():
    return ManualExecutor()


@pytest.fixture
def session():
    return requests.Session()


@pytest.fixture
def broken_storage():
    return BrokenStorage()


@pytest.fixture
def data_dir(tmp_path):
    """A data directory with a released catalog and two batch shards."""
    data = tmp_path / "data"
    data.mkdir()
    (data / "released_appids.csv").write_text(RELEASED_CSV, encoding="utf-8")
    (data / "Batch_1.csv").write_text(BATCH_1_CSV, encoding="utf-8")
    (data / "Batch_2.csv").write_text(BATCH_2_CSV, encoding="utf-8")
    (data / "Batch_3.csv").write_text("AppID,Year,Tags\n", encoding="utf-8")
    return tmp_path


@pytest.fixture
def loader(session, data_dir):
    return CatalogLoader(session=session, data_dir=str(data_dir))
