"""Daily Word - compose a short message and share it on WhatsApp."""

__version__ = "0.1.0"
