"""
Tests for the Textual composer

Tests cover:
- Typing into the form and autosave
- Draft restore on start and final save on exit
- Submitting from the send button
- Language switching
- Degraded storage display and the blur save
"""
import json
from datetime import datetime, timezone

import pytest
from textual import events

from conftest import FlakyStorage, ManualScheduler, RecordingLauncher, RecordingStorage
from dailyword.core.drafts import DraftRecord
from dailyword.tui.app import DailyWordApp
from dailyword.utils.config import AppConfig


def make_app(storage=None, launcher=None, language="en"):
    return DailyWordApp(
        AppConfig(),
        scheduler=ManualScheduler(),
        storage=storage if storage is not None else RecordingStorage(),
        launcher=launcher or RecordingLauncher(),
        language=language,
    )


class TestEditing:
    """Tests for typing into the form"""

    @pytest.mark.asyncio
    async def test_typing_updates_controller(self):
        """Test keystrokes reach the controller and the counter"""
        app = make_app()

        async with app.run_test() as pilot:
            app.message_form.name_input.focus()
            await pilot.press("J", "o", "h", "n")
            app.message_form.body_input.focus()
            await pilot.press("G", "o", "space", "o", "n")
            await pilot.pause()

            assert app.controller.author_name == "John"
            assert app.controller.body == "Go on"
            assert app.controller.word_count == 2
            assert app.message_form.send_button.disabled is False

    @pytest.mark.asyncio
    async def test_typing_is_autosaved(self):
        """Test edits are saved once the debounce elapses"""
        storage = RecordingStorage()
        app = make_app(storage=storage)

        async with app.run_test() as pilot:
            app.message_form.body_input.focus()
            await pilot.press("H", "i")
            await pilot.pause()
            app.scheduler.advance(1.5)

            assert json.loads(storage.get("daily_word_draft"))["message"] == "Hi"

    @pytest.mark.asyncio
    async def test_over_limit_disables_send(self):
        """Test the warning shows and sending is blocked past the limit"""
        app = make_app()

        async with app.run_test() as pilot:
            app.controller.set_body(" ".join(["word"] * 251))
            await pilot.pause()

            assert app.message_form.limit_warning.display is True
            assert app.message_form.word_counter.has_class("over-limit")
            assert app.message_form.send_button.disabled is True

    @pytest.mark.asyncio
    async def test_ctrl_s_saves_now(self):
        """Test the save binding writes without waiting for the debounce"""
        storage = RecordingStorage()
        app = make_app(storage=storage)

        async with app.run_test() as pilot:
            app.controller.set_body("Right now")
            await pilot.press("ctrl+s")
            await pilot.pause()

            assert len(storage.writes) == 1


class TestDraftLifecycle:
    """Tests for restoring and saving on start and exit"""

    @pytest.mark.asyncio
    async def test_restores_saved_draft(self):
        """Test a fresh draft fills the form on start"""
        record = DraftRecord(author_name="John", body="Grace", saved_at=datetime.now(timezone.utc))
        storage = RecordingStorage({"daily_word_draft": record.to_json()})
        app = make_app(storage=storage)

        async with app.run_test() as pilot:
            await pilot.pause()

            assert app.message_form.name_input.value == "John"
            assert app.message_form.body_input.text == "Grace"

    @pytest.mark.asyncio
    async def test_exit_saves_and_cancels_timers(self):
        """Test closing the app force-saves and stops every timer"""
        storage = RecordingStorage()
        app = make_app(storage=storage)

        async with app.run_test() as pilot:
            app.controller.set_body("Unsaved")
            await pilot.pause()

        assert json.loads(storage.get("daily_word_draft"))["message"] == "Unsaved"
        assert app.scheduler.pending == []

    @pytest.mark.asyncio
    async def test_degraded_storage_is_shown(self):
        """Test the form still works when storage is unavailable"""
        app = make_app(storage=FlakyStorage(probe_ok=False))

        async with app.run_test() as pilot:
            app.controller.set_body("Still works")
            await pilot.pause()

            assert app.message_form.save_status.has_class("degraded")
            assert app.message_form.send_button.disabled is False

    @pytest.mark.asyncio
    async def test_blur_saves_immediately(self):
        """Test losing focus writes the draft without waiting for the debounce"""
        storage = RecordingStorage()
        app = make_app(storage=storage)

        async with app.run_test() as pilot:
            app.controller.set_body("Before I leave")
            await pilot.pause()
            assert storage.writes == []

            app.post_message(events.AppBlur())
            await pilot.pause()

            assert json.loads(storage.get("daily_word_draft"))["message"] == "Before I leave"
            assert app.drafts.has_pending_save is False


class TestSubmit:
    """Tests for the send button"""

    @pytest.mark.asyncio
    async def test_send_button_shares_and_resets(self):
        """Test pressing send opens the link and empties the form"""
        launcher = RecordingLauncher()
        app = make_app(launcher=launcher)

        async with app.run_test() as pilot:
            app.controller.set_author_name("John")
            app.controller.set_body("Grace and peace")
            await pilot.pause()

            app.message_form.send_button.press()
            await pilot.pause()
            assert app.message_form.success_banner.display is True
            assert app.message_form.send_button.disabled is True

            app.scheduler.advance(1)
            await pilot.pause()

            assert launcher.opened == ["https://wa.me/?text=*John*%0A%0AGrace%20and%20peace"]
            assert app.message_form.name_input.value == ""
            assert app.message_form.body_input.text == ""
            assert app.message_form.success_banner.display is False

    @pytest.mark.asyncio
    async def test_share_failure_shows_link(self):
        """Test the share URL is shown when no browser opens"""
        app = make_app(launcher=RecordingLauncher(fail=True))

        async with app.run_test() as pilot:
            app.controller.set_body("Hi")
            await pilot.pause()
            app.message_form.send_button.press()
            await pilot.pause()
            app.scheduler.advance(1)
            await pilot.pause()

            assert app.message_form.share_error.display is True
            assert app.controller.body == "Hi"


class TestLanguage:
    """Tests for switching the display language"""

    @pytest.mark.asyncio
    async def test_f2_toggles_language(self):
        """Test the binding cycles between English and French"""
        app = make_app(language="en")

        async with app.run_test() as pilot:
            await pilot.press("f2")
            await pilot.pause()

            assert app.current_language == "fr"
            assert str(app.message_form.send_button.label) == "Partager via WhatsApp"
            assert app.app_header.language_select.value == "fr"

    @pytest.mark.asyncio
    async def test_language_change_keeps_text(self):
        """Test switching language does not touch the message"""
        app = make_app(language="fr")

        async with app.run_test() as pilot:
            app.controller.set_body("Amen")
            app.set_language("en")
            await pilot.pause()

            assert app.current_language == "en"
            assert app.message_form.body_input.text == "Amen"
