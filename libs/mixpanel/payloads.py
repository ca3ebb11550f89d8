"""Builders for the parameter maps sent to the ingestion endpoints.

Each builder returns a :class:`PreparedRequest` holding the endpoint name, the
JSON-ready parameters and whether the service should geolocate the caller from
the request address. The real client sends it; the mock client records it.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime, timedelta
from typing import Any

from .models import IGNORE_TIME, Event, PreparedRequest, Update

logger = logging.getLogger(__name__)

# Events older than this are rejected by /track and must go through /import.
IMPORT_THRESHOLD = timedelta(days=5)


def to_epoch(timestamp: datetime) -> int:
    return int(timestamp.timestamp())


def is_historical(timestamp: datetime, now: float | None = None) -> bool:
    """Return True when ``timestamp`` is more than five days before ``now`` (epoch seconds)."""
    if now is None:
        now = time.time()
    return timestamp.timestamp() < now - IMPORT_THRESHOLD.total_seconds()


def build_track(token: str, distinct_id: str, event_name: str, event: Event) -> PreparedRequest:
    endpoint = "track"
    props: dict[str, Any] = {
        "token": token,
        "distinct_id": distinct_id,
    }
    if event.ip:
        props["ip"] = event.ip
    if event.timestamp is not None:
        props["time"] = to_epoch(event.timestamp)
        if is_historical(event.timestamp):
            logger.info("Mixpanel timestamp is older than 5 days, using import endpoint for %s", event_name)
            endpoint = "import"

    props.update(event.properties)

    params = {
        "event": event_name,
        "properties": props,
    }
    return PreparedRequest(endpoint=endpoint, params=params, auto_geolocate=event.ip == "")


def build_update(token: str, distinct_id: str, update: Update) -> PreparedRequest:
    """Build an engage request. See https://mixpanel.com/help/reference/http#people-analytics-updates"""
    params: dict[str, Any] = {
        "$token": token,
        "$distinct_id": distinct_id,
    }
    if update.ip:
        params["$ip"] = update.ip
    if update.timestamp is IGNORE_TIME:
        params["$ignore_time"] = True
    elif update.timestamp is not None:
        params["$time"] = to_epoch(update.timestamp)

    params[update.operation] = update.properties

    return PreparedRequest(endpoint="engage", params=params, auto_geolocate=update.ip == "")


def build_alias(token: str, distinct_id: str, new_id: str) -> PreparedRequest:
    params = {
        "event": "$create_alias",
        "properties": {
            "token": token,
            "distinct_id": distinct_id,
            "alias": new_id,
        },
    }
    return PreparedRequest(endpoint="track", params=params, auto_geolocate=False)


__all__ = [
    "IMPORT_THRESHOLD",
    "build_alias",
    "build_track",
    "build_update",
    "is_historical",
    "to_epoch",
]
