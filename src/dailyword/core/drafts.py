"""Draft autosave: restore on start, debounced and forced saves, clearing.

Saving is best effort. Whatever goes wrong in storage stays inside
:class:`DraftStoreManager`; callers only ever see the ``status`` signal.
"""

import json
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from functools import partial
from typing import Callable, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from ..utils.config import DraftsConfig
from ..utils.errors import CorruptDraftError
from ..utils.logging import get_logger, log_event
from .scheduler import Scheduler, TimerHandle
from .storage import DraftStorage, JsonFileStorage

logger = get_logger(__name__)

DEFAULT_STORAGE_KEY = "daily_word_draft"
DEFAULT_FRESHNESS = timedelta(days=7)


class SaveStatus(str, Enum):
    """Autosave state shown next to the form."""

    IDLE = "idle"
    SAVING = "saving"
    SAVED = "saved"
    ERROR = "error"


@dataclass(frozen=True)
class DraftSnapshot:
    """Read-only copy of the two form fields at one moment."""

    author_name: str = ""
    body: str = ""

    def normalized(self) -> "DraftSnapshot":
        return DraftSnapshot(self.author_name.strip(), self.body.strip())

    @property
    def is_empty(self) -> bool:
        return not self.author_name.strip() and not self.body.strip()


EMPTY_SNAPSHOT = DraftSnapshot()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DraftRecord(BaseModel):
    """The persisted draft, stored as ``{"authorName", "message", "timestamp"}``."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    author_name: str = Field(default="", alias="authorName")
    body: str = Field(alias="message")
    saved_at: datetime = Field(alias="timestamp")

    @property
    def snapshot(self) -> DraftSnapshot:
        return DraftSnapshot(self.author_name, self.body)

    @property
    def saved_at_utc(self) -> datetime:
        if self.saved_at.tzinfo is None:
            return self.saved_at.replace(tzinfo=timezone.utc)
        return self.saved_at.astimezone(timezone.utc)

    def age(self, now: datetime) -> timedelta:
        return now - self.saved_at_utc

    def to_json(self) -> str:
        timestamp = self.saved_at_utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")
        return json.dumps(
            {"authorName": self.author_name, "message": self.body, "timestamp": timestamp},
            ensure_ascii=False,
        )

    @classmethod
    def from_json(cls, raw: str) -> "DraftRecord":
        """Parse a stored record.

        Raises:
            CorruptDraftError: If ``raw`` is not JSON or lacks the expected fields
        """
        try:
            return cls.model_validate_json(raw)
        except PydanticValidationError as e:
            raise CorruptDraftError(
                f"Stored draft failed validation: {e.error_count()} error(s)",
                details={"errors": [err["type"] for err in e.errors()]},
            ) from e


class DraftStoreManager:
    """Keeps a saved copy of the in-progress message reasonably fresh.

    Storage is probed on first use; if the probe fails autosave is switched
    off for the session and ``autosave_enabled`` stays False. Individual
    write failures are retried ``max_write_attempts`` times before the status
    goes to ``ERROR``.
    """

    def __init__(
        self,
        storage: Optional[DraftStorage],
        scheduler: Scheduler,
        *,
        key: str = DEFAULT_STORAGE_KEY,
        debounce_seconds: float = 1.0,
        backup_interval_seconds: float = 5.0,
        freshness: timedelta = DEFAULT_FRESHNESS,
        max_write_attempts: int = 3,
        retry_delay_seconds: float = 0.25,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.storage = storage
        self.scheduler = scheduler
        self.key = key
        self.debounce_seconds = debounce_seconds
        self.backup_interval_seconds = backup_interval_seconds
        self.freshness = freshness
        self.max_write_attempts = max(1, max_write_attempts)
        self.retry_delay_seconds = retry_delay_seconds
        self.clock = clock

        self.status = SaveStatus.IDLE
        self.last_saved_at: Optional[datetime] = None
        self.last_error: Optional[str] = None

        self._available: Optional[bool] = None
        self._last_persisted: Optional[DraftSnapshot] = None
        self._pending: Optional[TimerHandle] = None
        self._backup: Optional[TimerHandle] = None
        self._snapshot_provider: Optional[Callable[[], DraftSnapshot]] = None
        self._listeners: List[Callable[[SaveStatus], None]] = []

    @classmethod
    def from_config(
        cls,
        config: DraftsConfig,
        scheduler: Scheduler,
        storage: Optional[DraftStorage] = None,
        **kwargs,
    ) -> "DraftStoreManager":
        """Build a manager from the ``drafts`` configuration section."""

        if storage is None and config.enabled:
            storage = JsonFileStorage(config.storage_path)

        return cls(
            storage if config.enabled else None,
            scheduler,
            key=config.storage_key,
            debounce_seconds=config.debounce_seconds,
            backup_interval_seconds=config.backup_interval_seconds,
            freshness=timedelta(days=config.freshness_days),
            max_write_attempts=config.max_write_attempts,
            retry_delay_seconds=config.retry_delay_seconds,
            **kwargs,
        )

    ## Status

    @property
    def autosave_enabled(self) -> bool:
        return self._ensure_available()

    @property
    def degraded(self) -> bool:
        """True when drafts are not currently being kept."""
        return not self._ensure_available() or self.status is SaveStatus.ERROR

    @property
    def has_pending_save(self) -> bool:
        return self._pending is not None and self._pending.active

    def add_status_listener(self, listener: Callable[[SaveStatus], None]) -> None:
        self._listeners.append(listener)

    def remove_status_listener(self, listener: Callable[[SaveStatus], None]) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _set_status(self, status: SaveStatus) -> None:
        if status is self.status:
            return

        self.status = status
        for listener in list(self._listeners):
            try:
                listener(status)
            except Exception:
                logger.exception("Save status listener failed")

    def _ensure_available(self) -> bool:
        """Probe storage once, before its first use."""

        if self._available is None:
            self._available = self._probe()

        return self._available

    def _probe(self) -> bool:
        if self.storage is None:
            logger.info("Draft autosave is disabled")
            return False

        try:
            ok = bool(self.storage.probe())
        except Exception as e:
            logger.warning(f"Storage probe raised: {e}")
            ok = False

        if not ok:
            self.last_error = "Local storage is unavailable"
            self._set_status(SaveStatus.ERROR)
            log_event("autosave_disabled", "Local storage unavailable, autosave disabled", level="WARNING")

        return ok

    ## Lifecycle

    def start(self, snapshot_provider: Callable[[], DraftSnapshot]) -> None:
        """Register the backup interval that force-saves non-empty content."""

        self._snapshot_provider = snapshot_provider

        if not self._ensure_available():
            return

        if self._backup is None or not self._backup.active:
            self._backup = self.scheduler.call_every(
                self.backup_interval_seconds, self._backup_tick, name="draft-backup"
            )
            logger.debug(f"Backup save armed every {self.backup_interval_seconds}s")

    def teardown(self) -> None:
        """Cancel every timer this manager armed."""

        self.scheduler.cancel(self._pending)
        self.scheduler.cancel(self._backup)
        self._pending = None
        self._backup = None
        self._snapshot_provider = None

    def handle_visibility_hidden(self) -> None:
        """Save right away; the window is about to stop being observed."""

        if self._snapshot_provider is not None:
            self.force_save(self._snapshot_provider())

    def handle_unload(self) -> None:
        """Final save before shutdown, then teardown."""

        self.handle_visibility_hidden()
        self.teardown()

    def _backup_tick(self) -> None:
        if self._snapshot_provider is None:
            return

        snapshot = self._snapshot_provider()
        if not snapshot.is_empty:
            self.force_save(snapshot)

    ## Operations

    def load_draft(self) -> Optional[DraftRecord]:
        """Return the saved draft if there is a fresh, well-formed one."""

        if not self._ensure_available():
            return None

        try:
            raw = self.storage.get(self.key)
        except Exception as e:
            logger.warning(f"Failed to read saved draft: {e}")
            self.last_error = str(e)
            return None

        if raw is None:
            self._last_persisted = EMPTY_SNAPSHOT
            return None

        try:
            record = DraftRecord.from_json(raw)
        except CorruptDraftError as e:
            logger.warning(f"Discarding corrupt draft: {e.message}")
            self._discard("corrupt")
            return None

        if record.snapshot.is_empty:
            self._discard("empty")
            return None

        age = record.age(self.clock())
        if age > self.freshness:
            logger.info(f"Discarding draft saved {age.days} day(s) ago")
            self._discard("stale")
            return None

        self._last_persisted = record.snapshot.normalized()
        self.last_saved_at = record.saved_at_utc
        log_event(
            "draft_restored",
            "Saved draft restored",
            age_seconds=int(age.total_seconds()),
            body_length=len(record.body),
        )
        return record

    def schedule_save(self, snapshot: DraftSnapshot) -> None:
        """Debounce a save of ``snapshot``; the latest call always wins."""

        if not self._ensure_available():
            return

        self.scheduler.cancel(self._pending)
        self._pending = None

        if self._is_unchanged(snapshot.normalized()):
            return

        self._pending = self.scheduler.call_later(
            self.debounce_seconds,
            partial(self._on_debounce, snapshot),
            name="draft-debounce",
        )

    def force_save(self, snapshot: DraftSnapshot) -> bool:
        """Write (or delete) immediately, superseding any pending save."""

        if not self._ensure_available():
            return False

        self.scheduler.cancel(self._pending)
        self._pending = None

        return self._persist(snapshot)

    def clear_draft(self) -> None:
        """Delete the saved draft regardless of what was last written."""

        self.scheduler.cancel(self._pending)
        self._pending = None

        if not self._ensure_available():
            return

        if self._remove_record():
            self._set_status(SaveStatus.IDLE)
            log_event("draft_cleared", "Saved draft cleared")

    ## Internals

    def _is_unchanged(self, normalized: DraftSnapshot) -> bool:
        return self._last_persisted is not None and normalized == self._last_persisted

    def _on_debounce(self, snapshot: DraftSnapshot) -> None:
        self._pending = None
        self._persist(snapshot, deferred=True)

    def _persist(self, snapshot: DraftSnapshot, first_attempt: int = 1, deferred: bool = False) -> bool:
        """Write a non-empty snapshot or delete the record for an empty one.

        Deferred saves wait ``retry_delay_seconds`` between attempts through
        the scheduler; forced saves retry on the spot.
        """

        normalized = snapshot.normalized()
        if self._is_unchanged(normalized):
            return True

        self._set_status(SaveStatus.SAVING)

        for attempt in range(first_attempt, self.max_write_attempts + 1):
            try:
                if normalized.is_empty:
                    self.storage.remove(self.key)
                else:
                    record = DraftRecord(
                        author_name=normalized.author_name,
                        body=normalized.body,
                        saved_at=self.clock(),
                    )
                    self.storage.set(self.key, record.to_json())
                    self.last_saved_at = record.saved_at_utc

            except Exception as e:
                self.last_error = str(e)
                logger.warning(
                    f"Draft save attempt {attempt}/{self.max_write_attempts} failed: {e}"
                )

                if deferred and attempt < self.max_write_attempts and self.retry_delay_seconds > 0:
                    self._pending = self.scheduler.call_later(
                        self.retry_delay_seconds,
                        partial(self._retry, snapshot, attempt + 1),
                        name="draft-retry",
                    )
                    return False
                continue

            self._last_persisted = normalized
            self.last_error = None
            self._set_status(SaveStatus.IDLE if normalized.is_empty else SaveStatus.SAVED)
            logger.debug(
                "Draft removed" if normalized.is_empty
                else f"Draft saved ({len(normalized.body)} chars)"
            )
            return True

        self._set_status(SaveStatus.ERROR)
        log_event(
            "draft_save_failed",
            "Draft save failed, giving up on this write",
            level="WARNING",
            attempts=self.max_write_attempts,
        )
        return False

    def _retry(self, snapshot: DraftSnapshot, attempt: int) -> None:
        self._pending = None
        self._persist(snapshot, first_attempt=attempt, deferred=True)

    def _remove_record(self) -> bool:
        try:
            self.storage.remove(self.key)
        except Exception as e:
            self.last_error = str(e)
            logger.warning(f"Failed to remove saved draft: {e}")
            return False

        self._last_persisted = EMPTY_SNAPSHOT
        return True

    def _discard(self, reason: str) -> None:
        if self._remove_record():
            log_event("draft_discarded", f"Saved draft discarded ({reason})", reason=reason)
