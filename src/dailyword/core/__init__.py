"""Draft autosave and message submission.

Public API:
    CompositionController - form state, word limit and the submit workflow
    DraftStoreManager - restore, debounced save, forced save, clearing
    APSchedulerTimers - production timer backend

Example:
    >>> from dailyword.core import build_session
    >>> controller, drafts = build_session(config, scheduler)
    >>> controller.restore_draft()
    >>> controller.set_body("Grace and peace")
"""

from typing import Optional, Tuple

from ..utils.config import AppConfig
from .composition import (
    WORD_LIMIT,
    CompositionController,
    CompositionState,
    SubmissionState,
    count_words,
)
from .drafts import DraftRecord, DraftSnapshot, DraftStoreManager, SaveStatus
from .scheduler import APSchedulerTimers, Scheduler, TimerHandle
from .share import BrowserShareLauncher, ShareLauncher, build_share_text, build_share_url
from .storage import DraftStorage, JsonFileStorage, MemoryStorage


def build_session(
    config: AppConfig,
    scheduler: Scheduler,
    storage: Optional[DraftStorage] = None,
    launcher: Optional[ShareLauncher] = None,
) -> Tuple[CompositionController, DraftStoreManager]:
    """Wire a controller and draft manager from configuration."""

    drafts = DraftStoreManager.from_config(config.drafts, scheduler, storage)
    controller = CompositionController(
        drafts,
        launcher or BrowserShareLauncher(),
        scheduler,
        share_base_url=config.share.base_url,
        submit_delay=config.share.submit_delay_seconds,
        word_limit=config.compose.word_limit,
    )
    return controller, drafts


__all__ = [
    "build_session",
    "WORD_LIMIT",
    "count_words",
    "CompositionController",
    "CompositionState",
    "SubmissionState",
    "DraftRecord",
    "DraftSnapshot",
    "DraftStoreManager",
    "SaveStatus",
    "APSchedulerTimers",
    "Scheduler",
    "TimerHandle",
    "BrowserShareLauncher",
    "ShareLauncher",
    "build_share_text",
    "build_share_url",
    "DraftStorage",
    "JsonFileStorage",
    "MemoryStorage",
]
