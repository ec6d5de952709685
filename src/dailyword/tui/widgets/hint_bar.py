from textual.widgets import Static


class HintBar(Static):
    """Displays keyboard shortcuts."""

    def __init__(self):
        super().__init__(
            "[b]Ctrl+S[/b] Save draft · [b]F2[/b] Language · [b]Ctrl+Q[/b] Quit",
            id="hint-bar",
        )
