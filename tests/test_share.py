"""
Tests for share text and URL construction
"""
import webbrowser
from unittest.mock import patch

import pytest

from dailyword.core.share import (
    BrowserShareLauncher,
    build_share_text,
    build_share_url,
    encode_uri_component,
)
from dailyword.utils.errors import ShareError


class TestShareText:
    """Tests for build_share_text"""

    def test_with_author(self):
        """Test the name is bold and separated by a blank line"""
        assert build_share_text("John", "Grace and peace") == "*John*\n\nGrace and peace"

    def test_author_is_trimmed(self):
        """Test surrounding whitespace is dropped from the name"""
        assert build_share_text("  Mary ", "Amen") == "*Mary*\n\nAmen"

    def test_without_author(self):
        """Test the body alone when the name is blank"""
        assert build_share_text("   ", "Amen") == "Amen"


class TestEncoding:
    """Tests for encode_uri_component"""

    @pytest.mark.parametrize("text, expected", [
        ("Grace and peace", "Grace%20and%20peace"),
        ("*John*\n\n", "*John*%0A%0A"),
        ("a&b=c?d/e#f", "a%26b%3Dc%3Fd%2Fe%23f"),
        ("-_.!~*'()", "-_.!~*'()"),
        ("Grâce", "Gr%C3%A2ce"),
        ("100% + 1", "100%25%20%2B%201"),
    ])
    def test_encode(self, text, expected):
        """Test encoding matches encodeURIComponent"""
        assert encode_uri_component(text) == expected


class TestShareUrl:
    """Tests for build_share_url"""

    def test_default_base(self):
        """Test the WhatsApp link format"""
        url = build_share_url("*John*\n\nGrace and peace")
        assert url == "https://wa.me/?text=*John*%0A%0AGrace%20and%20peace"

    def test_base_with_query(self):
        """Test an existing query string is extended"""
        assert build_share_url("hi", "https://example.com/send?x=1") == (
            "https://example.com/send?x=1&text=hi"
        )


class TestBrowserShareLauncher:
    """Tests for the browser launcher"""

    def test_open(self):
        """Test the URL goes to a new browser tab"""
        with patch("dailyword.core.share.webbrowser.open_new_tab", return_value=True) as mock_open:
            BrowserShareLauncher().open("https://wa.me/?text=hi")

        mock_open.assert_called_once_with("https://wa.me/?text=hi")

    def test_no_browser(self):
        """Test a False return becomes ShareError"""
        with patch("dailyword.core.share.webbrowser.open_new_tab", return_value=False):
            with pytest.raises(ShareError) as exc_info:
                BrowserShareLauncher().open("https://wa.me/?text=hi")

        assert exc_info.value.details["url"] == "https://wa.me/?text=hi"

    def test_browser_error(self):
        """Test webbrowser errors become ShareError"""
        with patch(
            "dailyword.core.share.webbrowser.open_new_tab",
            side_effect=webbrowser.Error("no runnable browser"),
        ):
            with pytest.raises(ShareError, match="no runnable browser"):
                BrowserShareLauncher().open("https://wa.me/?text=hi")
