"""
Shared test fixtures and configuration for pytest
"""
import os
import tempfile

# Point the application at a throwaway home before anything imports it
os.environ["DAILYWORD_HOME"] = tempfile.mkdtemp(prefix="dailyword-tests-")

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from dailyword.core.composition import CompositionController
from dailyword.core.drafts import DraftStoreManager
from dailyword.core.scheduler import Scheduler
from dailyword.core.storage import MemoryStorage
from dailyword.utils.config import ConfigManager
from dailyword.utils.errors import ShareError, StorageUnavailableError, StorageWriteError


class ManualScheduler(Scheduler):
    """Scheduler on a virtual clock; timers only fire inside ``advance``."""

    def __init__(self):
        super().__init__()
        self.now = 0.0
        self._due = {}

    def _arm(self, handle):
        self._due[handle.id] = (self.now + handle.delay, handle)

    def _disarm(self, handle):
        self._due.pop(handle.id, None)

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while True:
            due = [(when, h.id, h) for when, h in self._due.values() if when <= target]
            if not due:
                break
            when, _, handle = min(due)
            self.now = when
            if handle.repeat:
                self._due[handle.id] = (when + handle.delay, handle)
            else:
                self._due.pop(handle.id, None)
            self._fire(handle)
        self.now = target


class RecordingStorage(MemoryStorage):
    """Memory storage that records every write and delete."""

    def __init__(self, initial=None):
        super().__init__(initial)
        self.writes = []
        self.removals = 0

    def set(self, key, value):
        self.writes.append((key, value))
        super().set(key, value)

    def remove(self, key):
        self.removals += 1
        super().remove(key)


class FlakyStorage(RecordingStorage):
    """Fails the first ``failures`` writes (all of them when None)."""

    def __init__(self, failures=None, probe_ok=True):
        super().__init__()
        self.failures = failures
        self.probe_ok = probe_ok
        self.attempts = 0

    def probe(self):
        if not self.probe_ok:
            raise StorageUnavailableError("storage disabled")
        return True

    def set(self, key, value):
        self.attempts += 1
        if self.failures is None or self.attempts <= self.failures:
            raise StorageWriteError("disk full")
        super().set(key, value)


class RecordingLauncher:
    """Share launcher that remembers what it was asked to open."""

    def __init__(self, fail=False):
        self.fail = fail
        self.opened = []

    def open(self, url):
        if self.fail:
            raise ShareError("No web browser could be opened", details={"url": url})
        self.opened.append(url)


class FixedClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now=None):
        self.now = now or datetime(2025, 3, 2, 9, 30, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def storage():
    return RecordingStorage()


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def launcher():
    return RecordingLauncher()


@pytest.fixture
def drafts(storage, scheduler, clock):
    """Draft manager with the default 1s debounce and 5s backup interval"""
    return DraftStoreManager(storage, scheduler, clock=clock)


@pytest.fixture
def controller(drafts, launcher, scheduler):
    return CompositionController(drafts, launcher, scheduler)


@pytest.fixture
def config_path(tmp_path) -> Path:
    """Fresh config location with the singleton reset around the test"""
    ConfigManager.reset_instance()
    yield tmp_path / "config.json"
    ConfigManager.reset_instance()


def words(count: int) -> str:
    return " ".join(f"word{i}" for i in range(count))
