"""Shared helpers used by the client library and the mock service."""

from .config import DEFAULT_API_URL, MixpanelSettings, get_settings
from .logging import configure_logging

__all__ = ["DEFAULT_API_URL", "MixpanelSettings", "get_settings", "configure_logging"]
