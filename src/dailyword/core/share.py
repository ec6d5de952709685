"""Hand-off of a finished message to the share service."""

import webbrowser
from typing import Protocol
from urllib.parse import quote

from ..utils.errors import ShareError
from ..utils.logging import get_logger

logger = get_logger(__name__)

SHARE_BASE_URL = "https://wa.me/"

# Characters encodeURIComponent leaves alone besides ASCII letters and digits
_URI_COMPONENT_SAFE = "-_.!~*'()"


def build_share_text(author_name: str, body: str) -> str:
    """Prefix the body with the author's name in bold when one is given."""

    name = author_name.strip()
    if name:
        return f"*{name}*\n\n{body}"
    return body


def encode_uri_component(text: str) -> str:
    return quote(text, safe=_URI_COMPONENT_SAFE)


def build_share_url(text: str, base_url: str = SHARE_BASE_URL) -> str:
    """Append ``text`` to ``base_url`` as the percent-encoded ``text`` parameter."""

    separator = "&" if "?" in base_url else "?"
    return f"{base_url}{separator}text={encode_uri_component(text)}"


class ShareLauncher(Protocol):
    """Opens a share URL; raises ``ShareError`` if it cannot."""

    def open(self, url: str) -> None: ...


class BrowserShareLauncher:
    """Opens share links in a new tab of the user's web browser."""

    def open(self, url: str) -> None:
        try:
            opened = webbrowser.open_new_tab(url)
        except webbrowser.Error as e:
            raise ShareError(f"Browser error: {str(e)}", details={"url": url}) from e

        if not opened:
            raise ShareError("No web browser could be opened", details={"url": url})

        logger.debug("Share link opened in browser")
