import random

import pytest

from linemarks.bookmarks import BookmarkStore
from linemarks.config import Config
from linemarks.groups import GroupStore
from linemarks.session import Session
from linemarks_db import MemoryStateDAO


class CountingState(MemoryStateDAO):
    """MemoryStateDAO that records every write."""

    def __init__(self, initial=None):
        self.writes = []
        super().__init__(initial)

    def set(self, key, value):
        self.writes.append(key)
        super().set(key, value)


@pytest.fixture
def state():
    return CountingState()


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def config():
    return Config()


@pytest.fixture
def bookmarks(state):
    return BookmarkStore(state)


@pytest.fixture
def groups(state, bookmarks, config, rng):
    return GroupStore(state, bookmarks, config, rng)


@pytest.fixture
def session(state, config, rng):
    s = Session(state, config, rng).init()
    yield s
    s.teardown()
