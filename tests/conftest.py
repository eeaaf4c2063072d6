"""Shared test fixtures."""

import os
from datetime import datetime, timedelta, timezone
from itertools import count

import pytest

# Never touch real storage from tests
os.environ.setdefault("STORAGE_BACKEND", "memory")

from expense_tracker.config import get_settings  # noqa: E402
from expense_tracker.ledger import LedgerStore  # noqa: E402
from expense_tracker.services.storage import InMemoryKeyValueStore  # noqa: E402


class ManualTimer:
    """Stand-in for threading.Timer that only runs when fire() is called."""

    def __init__(self, interval, function, args=None, kwargs=None):
        self.interval = interval
        self.function = function
        self.args = args or ()
        self.kwargs = kwargs or {}
        self.daemon = False
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        if not self.cancelled:
            self.function(*self.args, **self.kwargs)


class StepClock:
    """Returns a new instant, one second later, on every call."""

    def __init__(self, start=datetime(2024, 3, 5, 8, 37, tzinfo=timezone.utc)):
        self._start = start
        self._ticks = count()

    def __call__(self):
        return self._start + timedelta(seconds=next(self._ticks))


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def kv_store():
    return InMemoryKeyValueStore()


@pytest.fixture
def clock():
    return StepClock()


@pytest.fixture
def ledger(kv_store, clock):
    store = LedgerStore(kv_store, key="expenses", clock=clock)
    store.load()
    return store


@pytest.fixture
def timers():
    return []


@pytest.fixture
def timer_factory(timers):
    def factory(interval, function, args=None, kwargs=None):
        timer = ManualTimer(interval, function, args=args, kwargs=kwargs)
        timers.append(timer)
        return timer
    return factory
