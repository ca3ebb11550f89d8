"""In-memory stand-in for :class:`~libs.mixpanel.client.MixpanelClient`.

The mock never touches the network. It keeps what each call would have told
the service about a user so tests can assert on it, either field by field or
by comparing ``str(mock)`` with an expected block of text.

Not safe for concurrent writers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .models import Event, PreparedRequest, Update
from .payloads import build_alias, build_track, build_update

logger = logging.getLogger(__name__)


@dataclass
class MockEvent:
    ip: str = ""
    timestamp: datetime | None = None
    properties: dict[str, Any] = field(default_factory=dict)


@dataclass
class MockPeople:
    ip: str = ""
    time: datetime | None = None
    properties: dict[str, Any] = field(default_factory=dict)
    events: dict[str, MockEvent] = field(default_factory=dict)


def _rfc3339(value: datetime) -> str:
    """Whole seconds with an offset; naive values are taken as local time."""
    if value.tzinfo is None:
        value = value.astimezone()
    rendered = value.isoformat(timespec="seconds")
    if rendered.endswith("+00:00"):
        rendered = rendered[:-6] + "Z"
    return rendered


def _line(indent: int, key: str, value: Any = None) -> str:
    prefix = "  " * indent
    if value is None or value == "":
        return f"{prefix}{key}:"
    if isinstance(value, datetime):
        value = _rfc3339(value)
    elif isinstance(value, bool):
        value = "true" if value else "false"
    return f"{prefix}{key}: {value}"


class MockClient:
    """Records Mixpanel calls per distinct id instead of sending them."""

    def __init__(self, token: str = "mock-token") -> None:
        self.token = token
        self.people: dict[str, MockPeople] = {}
        self.aliases: dict[str, list[str]] = {}
        self.sent: list[PreparedRequest] = []

    def _people(self, distinct_id: str) -> MockPeople:
        people = self.people.get(distinct_id)
        if people is None:
            people = self.people[distinct_id] = MockPeople()
        return people

    async def track(self, distinct_id: str, event_name: str, event: Event) -> None:
        self.sent.append(build_track(self.token, distinct_id, event_name, event))
        self._people(distinct_id).events[event_name] = MockEvent(
            ip=event.ip,
            timestamp=event.timestamp,
            properties=dict(event.properties),
        )
        logger.debug("Mock recorded event %s for %s", event_name, distinct_id)

    async def update(self, distinct_id: str, update: Update) -> None:
        self.sent.append(build_update(self.token, distinct_id, update))
        people = self._people(distinct_id)
        if update.ip:
            people.ip = update.ip
        # IGNORE_TIME and None both keep the previous value.
        if isinstance(update.timestamp, datetime):
            people.time = update.timestamp
        people.properties.update(update.properties)
        logger.debug("Mock applied %s for %s", update.operation, distinct_id)

    async def alias(self, distinct_id: str, new_id: str) -> None:
        self.sent.append(build_alias(self.token, distinct_id, new_id))
        self.aliases.setdefault(distinct_id, []).append(new_id)

    def __str__(self) -> str:
        lines: list[str] = []
        for distinct_id in sorted(self.people):
            people = self.people[distinct_id]
            lines.append(f"{distinct_id}:")
            lines.append(_line(1, "ip", people.ip))
            lines.append(_line(1, "time", people.time))
            lines.append(_line(1, "properties"))
            for key in sorted(people.properties):
                lines.append(_line(2, key, people.properties[key]))
            lines.append(_line(1, "events"))
            for event_name in sorted(people.events):
                event = people.events[event_name]
                lines.append(_line(2, event_name))
                lines.append(_line(3, "IP", event.ip))
                lines.append(_line(3, "Timestamp", event.timestamp))
                for key in sorted(event.properties):
                    lines.append(_line(3, key, event.properties[key]))
        return "\n".join(lines)


__all__ = ["MockClient", "MockEvent", "MockPeople"]
