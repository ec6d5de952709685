"""Timer scheduling for autosave and submission.

Every timer the application arms goes through a :class:`Scheduler`, which
keeps track of the handles it gave out so that teardown can cancel all of
them in one call. Callbacks always run on the thread that owns the event
loop; nothing here sleeps.
"""

import asyncio
import itertools
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Callable, Optional

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from ..utils.errors import ValidationError
from ..utils.logging import get_logger

logger = get_logger(__name__)

_handle_ids = itertools.count(1)


@dataclass(eq=False)
class TimerHandle:
    """A scheduled one-shot or repeating callback."""

    callback: Callable[[], Any]
    delay: float
    repeat: bool = False
    name: str = ""
    id: int = field(default_factory=lambda: next(_handle_ids))
    cancelled: bool = False
    fired: int = 0
    token: Any = None
    owner: Optional["Scheduler"] = field(default=None, repr=False)

    @property
    def active(self) -> bool:
        """True while the callback can still fire."""
        return not self.cancelled and (self.repeat or self.fired == 0)

    def cancel(self) -> None:
        """Cancel the timer; a no-op if it already fired or was cancelled."""
        if self.owner is not None:
            self.owner.cancel(self)
        else:
            self.cancelled = True


class Scheduler(ABC):
    """Tracks timer handles and delegates the actual timing to a backend."""

    def __init__(self):
        self._handles: dict[int, TimerHandle] = {}

    @property
    def pending(self) -> list[TimerHandle]:
        """Handles that have not fired (one-shot) or been cancelled."""
        return [h for h in self._handles.values() if h.active]

    def call_later(self, delay: float, callback: Callable[[], Any], name: str = "") -> TimerHandle:
        """Run ``callback`` once after ``delay`` seconds."""
        return self._register(TimerHandle(callback, max(delay, 0.0), repeat=False, name=name))

    def call_every(self, interval: float, callback: Callable[[], Any], name: str = "") -> TimerHandle:
        """Run ``callback`` every ``interval`` seconds until cancelled."""
        if interval <= 0:
            raise ValidationError(f"Interval must be positive, got {interval}")
        return self._register(TimerHandle(callback, interval, repeat=True, name=name))

    def cancel(self, handle: Optional[TimerHandle]) -> None:
        if handle is None or handle.cancelled:
            return

        handle.cancelled = True
        self._handles.pop(handle.id, None)
        self._disarm(handle)

    def cancel_all(self) -> None:
        """Cancel every outstanding handle."""
        handles = list(self._handles.values())
        for handle in handles:
            self.cancel(handle)

        if handles:
            logger.debug(f"Cancelled {len(handles)} pending timer(s)")

    def start(self) -> None:
        """Backends that need an event loop start it here."""

    def shutdown(self) -> None:
        self.cancel_all()

    def _register(self, handle: TimerHandle) -> TimerHandle:
        handle.owner = self
        self._handles[handle.id] = handle
        self._arm(handle)
        return handle

    def _fire(self, handle: TimerHandle) -> None:
        """Invoke a handle's callback from the backend."""

        if handle.cancelled:
            return

        if not handle.repeat:
            if handle.fired:
                return
            self._handles.pop(handle.id, None)

        handle.fired += 1

        try:
            handle.callback()
        except Exception:
            # A failing callback must not take the event loop down with it
            logger.exception(f"Timer callback {handle.name or handle.id} failed")

    @abstractmethod
    def _arm(self, handle: TimerHandle) -> None:
        """Start timing ``handle`` in the backend."""

    @abstractmethod
    def _disarm(self, handle: TimerHandle) -> None:
        """Stop timing ``handle`` in the backend."""


class APSchedulerTimers(Scheduler):
    """Scheduler backed by APScheduler's asyncio scheduler.

    Jobs are registered as coroutines so the executor runs them as tasks on
    the event loop instead of handing them to a thread pool.
    """

    def __init__(self, event_loop: Optional[asyncio.AbstractEventLoop] = None):
        super().__init__()
        self._event_loop = event_loop
        self._scheduler: Optional[AsyncIOScheduler] = None

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    def start(self) -> None:
        """Start the underlying scheduler on the current (or given) loop."""

        if self.running:
            logger.debug("Timer scheduler is already running")
            return

        loop = self._event_loop or asyncio.get_running_loop()
        self._scheduler = AsyncIOScheduler(event_loop=loop)
        self._scheduler.start()
        logger.info("Timer scheduler started")

    def shutdown(self) -> None:
        super().shutdown()

        if self.running:
            self._scheduler.shutdown(wait=False)
            logger.info("Timer scheduler stopped")

        self._scheduler = None

    def _job_runner(self, handle: TimerHandle):
        async def run_timer():
            self._fire(handle)

        return run_timer

    def _arm(self, handle: TimerHandle) -> None:
        if not self.running:
            self.start()

        job_id = f"timer-{handle.id}"
        if handle.repeat:
            handle.token = self._scheduler.add_job(
                self._job_runner(handle),
                "interval",
                seconds=handle.delay,
                id=job_id,
                coalesce=True,
                max_instances=1,
                misfire_grace_time=None,
            )
        else:
            handle.token = self._scheduler.add_job(
                self._job_runner(handle),
                "date",
                run_date=datetime.now() + timedelta(seconds=handle.delay),
                id=job_id,
                misfire_grace_time=None,
            )

    def _disarm(self, handle: TimerHandle) -> None:
        job = handle.token
        handle.token = None

        if job is None or not self.running:
            return

        try:
            job.remove()
        except JobLookupError:
            # One-shot jobs are dropped by APScheduler once they run
            pass
