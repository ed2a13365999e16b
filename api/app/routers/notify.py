import json
import logging

import httpx
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from app.config import Settings, get_settings
from app.errors import (
    DeliveryError,
    InvalidInput,
    MethodNotAllowed,
    MissingConfiguration,
    UpstreamError,
)
from app.formatting import build_message, mask_payload
from app.telegram import OutboundMessage, get_http_client, send_message

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["notify"])


def _reject_constant(name: str):
    raise ValueError(f"{name} is not valid JSON")


def loads_strict(text):
    """``json.loads`` without the NaN and Infinity extensions."""
    return json.loads(text, parse_constant=_reject_constant)


async def require_post(request: Request) -> None:
    if request.method != "POST":
        raise MethodNotAllowed()


def parse_payload(raw: bytes) -> dict:
    """
    Decode a submission body.

    Empty bodies and ``null`` give an empty payload. A JSON-encoded string is
    decoded a second time. Other non-object values are kept under ``raw``.
    """
    try:
        payload = loads_strict(raw) if raw.strip() else {}
        if isinstance(payload, str):
            payload = loads_strict(payload) if payload.strip() else {}
    except (ValueError, RecursionError) as exc:
        logger.error("Invalid JSON: %s", exc)
        raise InvalidInput() from exc

    if payload is None:
        return {}
    if not isinstance(payload, dict):
        return {"raw": payload}
    return payload


@router.api_route(
    "/sendTelegram",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"],
    dependencies=[Depends(require_post)],
    summary="Relay a form submission to Telegram",
)
async def send_telegram(
    request: Request,
    settings: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    missing = settings.missing_credentials()
    if missing:
        logger.error("Missing env vars: %s", ", ".join(missing))
        raise MissingConfiguration(missing)

    payload = parse_payload(await request.body())

    logger.info(
        "sendTelegram invoked. payload (masked): %s",
        json.dumps(mask_payload(payload), ensure_ascii=False, default=str),
    )

    message = OutboundMessage(chat_id=settings.telegram_chat_id, text=build_message(payload))

    try:
        response = await send_message(client, settings, message)
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        logger.error("Fetch error when calling Telegram API: %s", exc)
        raise DeliveryError(str(exc)) from exc

    body_text = response.text
    if not response.is_success:
        raise UpstreamError(body_text)

    try:
        parsed = loads_strict(body_text)
    except (ValueError, RecursionError):
        return PlainTextResponse(body_text)

    if isinstance(parsed, str):
        return PlainTextResponse(parsed)
    return JSONResponse(parsed)
