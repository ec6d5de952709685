"""Message composition state and the submit workflow."""

import re
from dataclasses import dataclass, replace
from enum import Enum
from functools import partial
from typing import Callable, List, Optional

from ..utils.errors import ShareError, format_error_message
from ..utils.logging import get_logger, log_event
from .drafts import DraftRecord, DraftSnapshot, DraftStoreManager, SaveStatus
from .scheduler import Scheduler, TimerHandle
from .share import SHARE_BASE_URL, ShareLauncher, build_share_text, build_share_url

logger = get_logger(__name__)

WORD_LIMIT = 250
SUBMIT_DELAY_SECONDS = 0.8

# ECMAScript WhiteSpace and LineTerminator code points, as matched by a
# browser's \s and trim(). Unlike Python's \s this includes U+FEFF and
# excludes U+001C..U+001F.
_WHITESPACE_CODEPOINTS = (
    0x09, 0x0A, 0x0B, 0x0C, 0x0D, 0x20, 0xA0, 0x1680,
    *range(0x2000, 0x200B),
    0x2028, 0x2029, 0x202F, 0x205F, 0x3000, 0xFEFF,
)
_WHITESPACE = re.compile(
    "[" + re.escape("".join(map(chr, _WHITESPACE_CODEPOINTS))) + "]+"
)


def count_words(text: str) -> int:
    """Count whitespace-separated words in ``text``."""
    return len([word for word in _WHITESPACE.split(text) if word])


class SubmissionState(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"


@dataclass(frozen=True)
class CompositionState:
    """The two form fields plus the values derived from them."""

    author_name: str = ""
    body: str = ""
    word_limit: int = WORD_LIMIT

    @property
    def word_count(self) -> int:
        return count_words(self.body)

    @property
    def is_over_limit(self) -> bool:
        return self.word_count > self.word_limit

    @property
    def can_submit(self) -> bool:
        # A body with at least one word is non-empty once trimmed
        return self.word_count > 0 and not self.is_over_limit

    def snapshot(self) -> DraftSnapshot:
        return DraftSnapshot(self.author_name, self.body)


class CompositionController:
    """Owns the form state; hands finished messages to the share launcher.

    Every edit is forwarded to the draft manager as a snapshot. ``submit``
    moves ``Idle -> Submitting``, waits ``submit_delay`` so the success
    indicator can show, opens the share link, empties the form and clears
    the saved draft before returning to ``Idle``.
    """

    def __init__(
        self,
        drafts: DraftStoreManager,
        launcher: ShareLauncher,
        scheduler: Scheduler,
        *,
        share_base_url: str = SHARE_BASE_URL,
        submit_delay: float = SUBMIT_DELAY_SECONDS,
        word_limit: int = WORD_LIMIT,
    ):
        self.drafts = drafts
        self.launcher = launcher
        self.scheduler = scheduler
        self.share_base_url = share_base_url
        self.submit_delay = submit_delay

        self.state = CompositionState(word_limit=word_limit)
        self.submission = SubmissionState.IDLE
        self.show_success = False
        self.last_share_url: Optional[str] = None
        self.last_error: Optional[str] = None

        self._submit_timer: Optional[TimerHandle] = None
        self._listeners: List[Callable[["CompositionController"], None]] = []

    ## Derived values

    @property
    def author_name(self) -> str:
        return self.state.author_name

    @property
    def body(self) -> str:
        return self.state.body

    @property
    def word_count(self) -> int:
        return self.state.word_count

    @property
    def is_over_limit(self) -> bool:
        return self.state.is_over_limit

    @property
    def can_submit(self) -> bool:
        return self.state.can_submit

    @property
    def is_submitting(self) -> bool:
        return self.submission is SubmissionState.SUBMITTING

    @property
    def save_status(self) -> SaveStatus:
        return self.drafts.status

    @property
    def autosave_degraded(self) -> bool:
        return self.drafts.degraded

    def snapshot(self) -> DraftSnapshot:
        return self.state.snapshot()

    ## Change notification

    def add_listener(self, listener: Callable[["CompositionController"], None]) -> None:
        self._listeners.append(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("Composition listener failed")

    ## Editing

    def set_author_name(self, text: str) -> None:
        self._update(replace(self.state, author_name=text))

    def set_body(self, text: str) -> None:
        self._update(replace(self.state, body=text))

    def _update(self, state: CompositionState) -> None:
        if state == self.state:
            return

        self.state = state
        self.drafts.schedule_save(state.snapshot())
        self._notify()

    def restore_draft(self) -> Optional[DraftRecord]:
        """Seed the form from a saved draft, if there is a fresh one."""

        record = self.drafts.load_draft()
        if record is not None:
            self.state = replace(self.state, author_name=record.author_name, body=record.body)
            self._notify()

        return record

    ## Submission

    def submit(self) -> bool:
        """Start sharing the current message.

        Returns:
            True if a submission was started, False if it was ignored
        """

        if self.is_submitting or not self.can_submit:
            return False

        self.submission = SubmissionState.SUBMITTING
        self.show_success = True
        self.last_error = None

        url = build_share_url(
            build_share_text(self.author_name, self.body), self.share_base_url
        )
        self.last_share_url = url
        self._notify()

        if self.submit_delay > 0:
            self._submit_timer = self.scheduler.call_later(
                self.submit_delay, partial(self._complete_submission, url), name="submit"
            )
        else:
            self._complete_submission(url)

        return True

    def _complete_submission(self, url: str) -> None:
        self._submit_timer = None
        words = self.word_count

        try:
            self.launcher.open(url)
        except Exception as e:
            # The message stays in the form and in the saved draft
            if isinstance(e, ShareError):
                logger.error(f"Failed to open share link: {e.message}")
            else:
                logger.exception("Share launcher failed")
            self.last_error = format_error_message(e)
            self.show_success = False
            self.submission = SubmissionState.IDLE
            self._notify()
            return

        log_event(
            "message_shared",
            "Message handed to share service",
            word_count=words,
            has_author=bool(self.author_name.strip()),
        )

        self.state = CompositionState(word_limit=self.state.word_limit)
        self.drafts.clear_draft()
        self.show_success = False
        self.submission = SubmissionState.IDLE
        self._notify()

    def teardown(self) -> None:
        self.scheduler.cancel(self._submit_timer)
        self._submit_timer = None
        self._listeners.clear()
