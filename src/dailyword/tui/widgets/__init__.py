from .features import FeaturesPanel
from .header import AppHeader, LanguageChanged
from .hint_bar import HintBar
from .message_form import MessageForm

__all__ = ["AppHeader", "FeaturesPanel", "HintBar", "LanguageChanged", "MessageForm"]
