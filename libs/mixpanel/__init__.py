"""Client for the Mixpanel event tracking and people APIs, plus an in-memory mock."""

from libs.common.config import DEFAULT_API_URL

from .client import Mixpanel, MixpanelClient
from .errors import (
    MixpanelEncodeError,
    MixpanelError,
    MixpanelRequestError,
    MixpanelResponseError,
    MixpanelTransportError,
)
from .mock import MockClient
from .models import IGNORE_TIME, Event, IgnoreTime, PreparedRequest, Update

__all__ = [
    "DEFAULT_API_URL",
    "IGNORE_TIME",
    "Event",
    "IgnoreTime",
    "Mixpanel",
    "MixpanelClient",
    "MixpanelEncodeError",
    "MixpanelError",
    "MixpanelRequestError",
    "MixpanelResponseError",
    "MixpanelTransportError",
    "MockClient",
    "PreparedRequest",
    "Update",
]
