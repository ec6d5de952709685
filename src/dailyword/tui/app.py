from typing import Optional

from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import VerticalScroll
from textual.widgets import Static

from ..core import build_session
from ..core.drafts import SaveStatus
from ..core.scheduler import APSchedulerTimers, Scheduler
from ..core.share import ShareLauncher
from ..core.storage import DraftStorage
from ..core.translations import SUPPORTED_LANGUAGES, get_translations, resolve_language
from ..utils.config import AppConfig, ConfigManager
from ..utils.errors import error_context, safe_execute
from ..utils.logging import get_logger
from .widgets import AppHeader, FeaturesPanel, HintBar, LanguageChanged, MessageForm

logger = get_logger(__name__)


class DailyWordApp(App):
    CSS_PATH = "styles.tcss"
    TITLE = "Daily Word"

    BINDINGS = [
        Binding("ctrl+s", "save_draft", "Save draft"),
        Binding("f2", "toggle_language", "Language"),
        Binding("ctrl+q", "quit", "Quit"),
    ]

    def __init__(
        self,
        app_config: Optional[AppConfig] = None,
        scheduler: Optional[Scheduler] = None,
        storage: Optional[DraftStorage] = None,
        launcher: Optional[ShareLauncher] = None,
        language: Optional[str] = None,
    ):
        super().__init__()
        self.app_config = app_config or ConfigManager().config
        self.scheduler = scheduler or APSchedulerTimers()
        self.controller, self.drafts = build_session(
            self.app_config, self.scheduler, storage=storage, launcher=launcher
        )
        self.current_language = resolve_language(language or self.app_config.ui.language)
        self.strings = get_translations(self.current_language)
        self._session_closed = False

        self.app_header = AppHeader(self.current_language, self.strings)
        self.message_form = MessageForm(
            self.controller,
            self.strings,
            warning_threshold=self.app_config.compose.warning_threshold,
        )
        self.features_panel = FeaturesPanel(self.strings) if self.app_config.ui.show_features else None
        self.footer_verse = Static(self.strings["footer_verse"], id="footer-verse")
        self.footer_note = Static(self.strings["footer_note"], id="footer-note")

    def compose(self) -> ComposeResult:
        yield self.app_header
        with VerticalScroll(id="main"):
            yield self.message_form
            if self.features_panel is not None:
                yield self.features_panel
            yield self.footer_verse
            yield self.footer_note
        yield HintBar()

    # --- Lifecycle ---
    def on_mount(self) -> None:
        self.scheduler.start()

        record = self.controller.restore_draft()
        self.controller.add_listener(lambda _controller: self.message_form.refresh_view())
        self.drafts.add_status_listener(self._on_save_status)
        self.drafts.start(self.controller.snapshot)
        self.message_form.refresh_view()

        if record is not None:
            self.notify(self.strings["draft_restored"])
        if not self.drafts.autosave_enabled:
            self.notify(self.strings["autosave_disabled"], severity="warning")

    def on_app_blur(self, event: events.AppBlur) -> None:
        safe_execute(self.drafts.handle_visibility_hidden, context="app_blur")

    def on_unmount(self) -> None:
        self.close_session()

    def close_session(self) -> None:
        """Save what is on screen and stop every timer. Safe to call twice."""

        if self._session_closed:
            return

        self._session_closed = True
        self.drafts.remove_status_listener(self._on_save_status)

        # The final save is best effort; timers are stopped regardless
        with error_context("close_session", reraise=False):
            self.drafts.handle_unload()

        self.controller.teardown()
        self.scheduler.shutdown()
        logger.info("Session closed")

    def _on_save_status(self, status: SaveStatus) -> None:
        self.message_form.refresh_view()

    # --- Actions ---
    async def action_quit(self) -> None:
        self.close_session()
        self.exit()

    def action_save_draft(self) -> None:
        if self.drafts.force_save(self.controller.snapshot()):
            self.notify(self.strings["save_status_saved"])
        else:
            self.notify(self.message_form.save_status_text(), severity="warning")

    def action_toggle_language(self) -> None:
        index = SUPPORTED_LANGUAGES.index(self.current_language)
        self.set_language(SUPPORTED_LANGUAGES[(index + 1) % len(SUPPORTED_LANGUAGES)])

    def on_language_changed(self, event: LanguageChanged) -> None:
        self.set_language(event.language)

    def set_language(self, language: str) -> None:
        self.current_language = resolve_language(language)
        self.strings = get_translations(self.current_language)
        self.app_header.set_strings(self.current_language, self.strings)
        self.message_form.set_strings(self.strings)
        if self.features_panel is not None:
            self.features_panel.set_strings(self.strings)
        self.footer_verse.update(self.strings["footer_verse"])
        self.footer_note.update(self.strings["footer_note"])
