from __future__ import annotations

import base64
import json
import logging
from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from libs.common import configure_logging, get_settings

logger = logging.getLogger(__name__)

ENDPOINTS = {"track", "import", "engage"}

app = FastAPI(title="Mixpanel Ingestion Mock")
app.state.received = []


def _reply(ok: bool, error: str | None, verbose: bool, status_code: int = 200) -> Response:
    if verbose:
        return JSONResponse({"status": 1 if ok else 0, "error": error}, status_code=status_code)
    return Response(content="1" if ok else "0", media_type="text/plain", status_code=status_code)


def _decode(data: str) -> Any:
    return json.loads(base64.b64decode(data, validate=True).decode("utf-8"))


def _token(endpoint: str, payload: dict[str, Any]) -> str | None:
    if endpoint == "engage":
        return payload.get("$token")
    properties = payload.get("properties")
    if isinstance(properties, dict):
        return properties.get("token")
    return None


@app.post("/{endpoint}")
async def ingest(
    endpoint: str,
    request: Request,
    data: str | None = None,
    ip: int = 0,
    verbose: int = 0,
) -> Response:
    verbose_reply = verbose == 1
    if endpoint not in ENDPOINTS:
        return _reply(False, "unknown endpoint", verbose_reply, status_code=404)

    if endpoint == "import" and "authorization" not in request.headers:
        return _reply(False, "import requires the project API secret", verbose_reply, status_code=401)

    if not data:
        return _reply(False, "data, missing or empty", verbose_reply, status_code=400)
    try:
        payload = _decode(data)
    except ValueError as exc:
        logger.info("Rejected undecodable payload on /%s: %s", endpoint, exc)
        return _reply(False, "data, invalid base64 or JSON", verbose_reply, status_code=400)
    if not isinstance(payload, dict):
        return _reply(False, "data, expected a JSON object", verbose_reply, status_code=400)

    if not _token(endpoint, payload):
        return _reply(False, "token missing", verbose_reply)

    request.app.state.received.append(
        {
            "endpoint": endpoint,
            "payload": payload,
            "ip": ip == 1,
            "verbose": verbose_reply,
        }
    )
    logger.info("Accepted /%s payload", endpoint)
    return _reply(True, None, verbose_reply)


@app.get("/received")
async def list_received(request: Request) -> list[dict[str, Any]]:
    return request.app.state.received


@app.delete("/received", status_code=204)
async def clear_received(request: Request) -> Response:
    request.app.state.received.clear()
    return Response(status_code=204)


def run():  # pragma: no cover - dev helper
    import uvicorn

    settings = get_settings()
    configure_logging(settings.log_level)
    uvicorn.run(
        "services.mixpanel_mock.main:app",
        host="0.0.0.0",
        port=settings.mixpanel_mock_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
