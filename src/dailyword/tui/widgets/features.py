from typing import Dict

from textual.containers import Horizontal, Vertical
from textual.widgets import Static

FEATURE_KEYS = ("feature1", "feature2", "feature3")


class FeatureCard(Vertical):
    """One titled feature description."""

    def __init__(self, key: str, strings: Dict[str, str]):
        super().__init__(classes=f"feature-card {key}")
        self.key = key
        self.title_label = Static(strings[f"{key}_title"], classes="feature-title")
        self.description_label = Static(strings[f"{key}_description"], classes="feature-description")

    def compose(self):
        yield self.title_label
        yield self.description_label

    def set_strings(self, strings: Dict[str, str]) -> None:
        self.title_label.update(strings[f"{self.key}_title"])
        self.description_label.update(strings[f"{self.key}_description"])


class FeaturesPanel(Horizontal):
    """The three feature cards under the form."""

    def __init__(self, strings: Dict[str, str]):
        super().__init__(id="features")
        self.cards = [FeatureCard(key, strings) for key in FEATURE_KEYS]

    def compose(self):
        yield from self.cards

    def set_strings(self, strings: Dict[str, str]) -> None:
        for card in self.cards:
            card.set_strings(strings)
