"""Errors raised by the Mixpanel client."""

from __future__ import annotations


class MixpanelError(Exception):
    """Base error for the Mixpanel client."""


class MixpanelEncodeError(MixpanelError):
    """Raised when the request parameters cannot be serialised to JSON."""


class MixpanelRequestError(MixpanelError):
    """A request was formed but did not succeed.

    ``http_status`` is 0 when no response was received. ``code`` is the
    ``status`` field decoded from the response body, where 1 means success.
    """

    def __init__(self, url: str, message: str = "", http_status: int = 0, code: int = 0) -> None:
        self.url = url
        self.message = message
        self.http_status = http_status
        self.code = code
        super().__init__(str(self))

    def __str__(self) -> str:
        return f"MixpanelClient status={self.http_status} code={self.code} message={self.message}"


class MixpanelTransportError(MixpanelRequestError):
    """Raised when the connection fails or the response body cannot be read."""


class MixpanelResponseError(MixpanelRequestError):
    """Raised when the response is undecodable or reports a status other than 1."""


__all__ = [
    "MixpanelError",
    "MixpanelEncodeError",
    "MixpanelRequestError",
    "MixpanelTransportError",
    "MixpanelResponseError",
]
