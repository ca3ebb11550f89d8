from __future__ import annotations

import base64
import json
import logging
from typing import Any, Protocol
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from libs.common import DEFAULT_API_URL, MixpanelSettings, get_settings

from .errors import MixpanelEncodeError, MixpanelResponseError, MixpanelTransportError
from .models import Endpoint, Event, MixpanelResponse, Update
from .payloads import build_alias, build_track, build_update

logger = logging.getLogger(__name__)


class Mixpanel(Protocol):
    """Operations shared by the HTTP client and the in-memory mock."""

    async def track(self, distinct_id: str, event_name: str, event: Event) -> None:
        """Record an event for ``distinct_id``."""

    async def update(self, distinct_id: str, update: Update) -> None:
        """Apply a profile update to ``distinct_id``."""

    async def alias(self, distinct_id: str, new_id: str) -> None:
        """Make ``new_id`` an alias of ``distinct_id``."""


class MixpanelClient:
    """Thin async wrapper around the Mixpanel ingestion API.

    Every call is a single POST; nothing is buffered or retried.
    """

    def __init__(
        self,
        token: str,
        api_key: str = "",
        api_secret: str = "",
        api_url: str | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._token = token
        self._api_key = api_key
        self._api_secret = api_secret
        self._api_url = (api_url or DEFAULT_API_URL).rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    @classmethod
    def from_settings(
        cls,
        settings: MixpanelSettings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> "MixpanelClient":
        settings = settings or get_settings()
        return cls(
            settings.mixpanel_token,
            settings.mixpanel_api_key,
            settings.mixpanel_api_secret,
            settings.mixpanel_api_url,
            client=client,
            timeout=settings.mixpanel_timeout,
        )

    @property
    def token(self) -> str:
        return self._token

    @property
    def api_url(self) -> str:
        return self._api_url

    async def track(self, distinct_id: str, event_name: str, event: Event) -> None:
        prepared = build_track(self._token, distinct_id, event_name, event)
        await self.send(prepared.endpoint, prepared.params, prepared.auto_geolocate)

    async def update(self, distinct_id: str, update: Update) -> None:
        prepared = build_update(self._token, distinct_id, update)
        await self.send(prepared.endpoint, prepared.params, prepared.auto_geolocate)

    async def alias(self, distinct_id: str, new_id: str) -> None:
        prepared = build_alias(self._token, distinct_id, new_id)
        await self.send(prepared.endpoint, prepared.params, prepared.auto_geolocate)

    def build_url(self, endpoint: Endpoint, params: Any, auto_geolocate: bool) -> str:
        """
        Serialise ``params`` and compose the request URL.

        Raises:
            MixpanelEncodeError: When ``params`` holds values JSON cannot encode
        """
        try:
            data = json.dumps(params, allow_nan=False).encode("utf-8")
        except (TypeError, ValueError) as exc:
            raise MixpanelEncodeError(str(exc)) from exc

        encoded = base64.b64encode(data).decode("ascii")
        url = f"{self._api_url}/{endpoint}?data={quote(encoded, safe='')}"
        if auto_geolocate:
            url += "&ip=1"
        # Ask for structured error bodies instead of a bare 0/1.
        url += "&verbose=1"
        return url

    async def send(self, endpoint: Endpoint, params: Any, auto_geolocate: bool) -> None:
        """
        Send one request to ``endpoint`` and check the service's verdict.

        Raises:
            MixpanelEncodeError: When ``params`` cannot be serialised
            MixpanelTransportError: When the request or the body read fails
            MixpanelResponseError: When the body is undecodable or status != 1
        """
        url = self.build_url(endpoint, params, auto_geolocate)

        request = self._client.build_request("POST", url)
        auth = httpx.BasicAuth(self._api_key, self._api_secret)
        try:
            response = await self._client.send(request, auth=auth, stream=True)
        except httpx.RequestError as exc:
            logger.warning("Mixpanel request to %s failed: %s", endpoint, exc)
            raise MixpanelTransportError(url, str(exc)) from exc

        try:
            body = await response.aread()
        except (httpx.RequestError, httpx.StreamError) as exc:
            logger.warning("Failed to read Mixpanel response from %s: %s", endpoint, exc)
            raise MixpanelTransportError(url, str(exc)) from exc
        finally:
            await response.aclose()

        logger.debug("Mixpanel %s responded with HTTP %s: %s", endpoint, response.status_code, body[:200])

        message = ""
        code = 0
        if body:
            try:
                decoded = MixpanelResponse.model_validate_json(body)
            except ValidationError as exc:
                message = str(exc)
            else:
                message = decoded.message or ""
                code = decoded.status

        if code != 1:
            logger.warning(
                "Mixpanel rejected %s request: http_status=%s code=%s message=%s",
                endpoint,
                response.status_code,
                code,
                message,
            )
            raise MixpanelResponseError(url, message, response.status_code, code)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "MixpanelClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()


__all__ = ["Mixpanel", "MixpanelClient"]
