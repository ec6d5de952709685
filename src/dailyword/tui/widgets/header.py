from typing import Dict

from textual.containers import Horizontal, Vertical
from textual.message import Message
from textual.widgets import Select, Static

from ...core.translations import LANGUAGE_NAMES, SUPPORTED_LANGUAGES


class LanguageChanged(Message):
    """Emitted when the user picks another display language."""

    def __init__(self, language: str):
        super().__init__()
        self.language = language


class AppHeader(Vertical):
    """Title, tagline, language picker and the hero verse."""

    def __init__(self, language: str, strings: Dict[str, str]):
        super().__init__(id="app-header")
        self.title_label = Static(strings["app_title"], id="app-title")
        self.tagline_label = Static(strings["tagline"], id="tagline")
        self.verse_label = Static(strings["hero_verse"], id="hero-verse")
        self.language_select = Select(
            [(LANGUAGE_NAMES[code], code) for code in SUPPORTED_LANGUAGES],
            value=language,
            allow_blank=False,
            id="language-select",
        )
        self.language_select.tooltip = strings["language_label"]

    def compose(self):
        yield Horizontal(
            Vertical(self.title_label, self.tagline_label, id="title-block"),
            self.language_select,
            id="header-row",
        )
        yield self.verse_label

    def set_strings(self, language: str, strings: Dict[str, str]) -> None:
        self.title_label.update(strings["app_title"])
        self.tagline_label.update(strings["tagline"])
        self.verse_label.update(strings["hero_verse"])
        self.language_select.tooltip = strings["language_label"]
        if self.language_select.value != language:
            with self.prevent(Select.Changed):
                self.language_select.value = language

    def on_select_changed(self, event: Select.Changed) -> None:
        event.stop()
        if event.value in SUPPORTED_LANGUAGES:
            self.post_message(LanguageChanged(str(event.value)))
