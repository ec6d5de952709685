from typing import Dict, Optional

from textual.containers import Horizontal, Vertical
from textual.widgets import Button, Input, Label, Static, TextArea

from ...core.composition import CompositionController
from ...core.drafts import SaveStatus


class MessageForm(Vertical):
    """Name and message fields, the word counter and the send button.

    The form only mirrors the controller: edits are forwarded to it and
    ``refresh_view`` redraws everything from its current state.
    """

    def __init__(
        self,
        controller: CompositionController,
        strings: Dict[str, str],
        warning_threshold: int = 200,
    ):
        super().__init__(id="message-form")
        self.controller = controller
        self.strings = strings
        self.warning_threshold = warning_threshold

        self.form_title = Static(strings["form_title"], id="form-title")
        self.form_description = Static(strings["form_description"], id="form-description")
        self.name_label = Label(strings["preacher_name_label"], classes="field-label")
        self.name_input = Input(
            value=controller.author_name,
            placeholder=strings["preacher_name_placeholder"],
            id="author-input",
        )
        self.message_label = Label(strings["message_label"], classes="field-label")
        self.body_input = TextArea(
            controller.body,
            placeholder=strings["message_placeholder"],
            soft_wrap=True,
            id="body-input",
        )
        self.word_counter = Static("", id="word-count")
        self.limit_warning = Static(strings["word_limit_warning"], id="limit-warning")
        self.success_banner = Static(strings["success_message"], id="success-banner")
        self.share_error = Static("", id="share-error")
        self.save_status = Static("", id="save-status")
        self.send_button = Button(strings["send_button"], variant="success", id="send-button")

    def compose(self):
        yield self.form_title
        yield self.form_description
        yield self.name_label
        yield self.name_input
        yield self.message_label
        yield self.body_input
        yield Horizontal(self.word_counter, self.limit_warning, id="counter-row")
        yield self.success_banner
        yield self.share_error
        yield self.save_status
        yield self.send_button

    def on_mount(self) -> None:
        self.refresh_view()

    ## Input handling

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input is self.name_input:
            self.controller.set_author_name(event.value)

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        if event.text_area is self.body_input:
            self.controller.set_body(event.text_area.text)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button is self.send_button:
            event.stop()
            # Disable first so a second press cannot slip in
            self.send_button.disabled = True
            self.controller.submit()
            self.refresh_view()

    ## Rendering

    def set_strings(self, strings: Dict[str, str]) -> None:
        self.strings = strings
        self.form_title.update(strings["form_title"])
        self.form_description.update(strings["form_description"])
        self.name_label.update(strings["preacher_name_label"])
        self.name_input.placeholder = strings["preacher_name_placeholder"]
        self.message_label.update(strings["message_label"])
        self.body_input.placeholder = strings["message_placeholder"]
        self.limit_warning.update(strings["word_limit_warning"])
        self.success_banner.update(strings["success_message"])
        self.send_button.label = strings["send_button"]
        self.refresh_view()

    def save_status_text(self, status: Optional[SaveStatus] = None) -> str:
        if not self.controller.drafts.autosave_enabled:
            return self.strings["autosave_disabled"]

        status = status or self.controller.save_status
        return self.strings[f"save_status_{status.value}"]

    def refresh_view(self) -> None:
        controller = self.controller

        # Only push values back into the widgets when they differ, so typing
        # is never interrupted by its own echo
        if self.name_input.value != controller.author_name:
            self.name_input.value = controller.author_name
        if self.body_input.text != controller.body:
            self.body_input.text = controller.body

        count = controller.word_count
        limit = controller.state.word_limit
        self.word_counter.update(f"[b]{count}[/b] / {limit} {self.strings['word_count']}")
        self.word_counter.set_class(controller.is_over_limit, "over-limit")
        self.word_counter.set_class(
            not controller.is_over_limit and count > self.warning_threshold, "near-limit"
        )

        self.limit_warning.display = controller.is_over_limit
        self.success_banner.display = controller.show_success

        if controller.last_error and controller.last_share_url:
            self.share_error.update(f"{self.strings['share_failed']}\n{controller.last_share_url}")
            self.share_error.display = True
        else:
            self.share_error.display = False

        self.save_status.update(self.save_status_text())
        self.save_status.set_class(controller.autosave_degraded, "degraded")

        self.name_input.disabled = controller.is_submitting
        self.body_input.disabled = controller.is_submitting
        self.send_button.disabled = not controller.can_submit or controller.is_submitting
