"""Telegram Bot API delivery."""

import logging
from dataclasses import asdict, dataclass
from typing import AsyncIterator

import httpx
from fastapi import Depends

from app.config import Settings, get_settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OutboundMessage:
    """Body of a ``sendMessage`` call."""
    chat_id: str
    text: str
    parse_mode: str = "HTML"
    disable_web_page_preview: bool = True

    def to_json(self) -> dict:
        return asdict(self)


def send_message_url(api_base: str, token: str) -> str:
    return f"{api_base.rstrip('/')}/bot{token}/sendMessage"


def build_http_client(settings: Settings, **kwargs) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=settings.telegram_timeout,
        follow_redirects=True,
        **kwargs,
    )


async def get_http_client(
    settings: Settings = Depends(get_settings),
) -> AsyncIterator[httpx.AsyncClient]:
    """Per-request outbound client, closed once the response has been sent."""
    async with build_http_client(settings) as client:
        yield client


async def send_message(
    client: httpx.AsyncClient,
    settings: Settings,
    message: OutboundMessage,
) -> httpx.Response:
    """
    POST *message* to the bot's ``sendMessage`` endpoint.

    Makes exactly one attempt. Transport failures propagate as ``httpx`` errors;
    upstream error statuses are returned for the caller to relay.
    """
    url = send_message_url(settings.telegram_api_base, settings.telegram_token)
    response = await client.post(
        url,
        json=message.to_json(),
        headers={"Content-Type": "application/json"},
    )
    logger.info("Telegram API status: %s body: %s", response.status_code, response.text)
    return response
