from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

Endpoint = Literal["track", "import", "engage"]


class IgnoreTime(Enum):
    """Marker for an update that must not carry any timestamp."""

    IGNORE_TIME = "ignore_time"

    def __repr__(self) -> str:
        return "IGNORE_TIME"


IGNORE_TIME = IgnoreTime.IGNORE_TIME

# None: let the service use the current time.
UpdateTimestamp = Union[datetime, IgnoreTime, None]


@dataclass
class Event:
    """A tracked event. At least one property must be given."""

    properties: dict[str, Any]
    # Empty to let the service detect the address, "0" to send none at all.
    ip: str = ""
    # None uses the current time; older than five days goes to /import.
    timestamp: datetime | None = None


@dataclass
class Update:
    """A profile update such as ``$set`` or ``$add``. At least one property must be given."""

    operation: str
    properties: dict[str, Any]
    ip: str = ""
    timestamp: UpdateTimestamp = None


@dataclass(frozen=True)
class PreparedRequest:
    endpoint: Endpoint
    params: dict[str, Any] = field(default_factory=dict)
    auto_geolocate: bool = False


class MixpanelResponse(BaseModel):
    """Verbose response body returned by the ingestion API."""

    model_config = ConfigDict(strict=True, extra="ignore")

    message: str | None = Field(default=None, alias="error")
    status: int = 0


__all__ = [
    "Endpoint",
    "Event",
    "IGNORE_TIME",
    "IgnoreTime",
    "MixpanelResponse",
    "PreparedRequest",
    "Update",
    "UpdateTimestamp",
]
