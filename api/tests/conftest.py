import json

import httpx
import pytest
from fastapi.testclient import TestClient

from app.config import get_settings
from app.main import app
from app.telegram import build_http_client, get_http_client


class FakeTelegram:
    """Stands in for api.telegram.org behind an httpx.MockTransport."""

    def __init__(self):
        self.requests = []
        self.status_code = 200
        self.body = '{"ok":true}'
        self.error = None
        # path -> Location for redirecting responses
        self.redirects = {}

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if request.url.path in self.redirects:
            return httpx.Response(307, headers={"Location": self.redirects[request.url.path]})
        return httpx.Response(self.status_code, text=self.body)

    @property
    def sent(self) -> dict:
        return json.loads(self.requests[-1].content)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Run every test away from any developer .env file and stray Telegram vars."""
    monkeypatch.chdir(tmp_path)
    for name in ("TELEGRAM_TOKEN", "TELEGRAM_CHAT_ID", "TELEGRAM_API_BASE", "TELEGRAM_TIMEOUT", "APP_NAME"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def env(monkeypatch):
    monkeypatch.setenv("TELEGRAM_TOKEN", "123:abc")
    monkeypatch.setenv("TELEGRAM_CHAT_ID", "-100200300")


@pytest.fixture
def telegram():
    fake = FakeTelegram()

    async def _client():
        transport = httpx.MockTransport(fake.handler)
        async with build_http_client(get_settings(), transport=transport) as client:
            yield client

    app.dependency_overrides[get_http_client] = _client
    yield fake
    app.dependency_overrides.pop(get_http_client, None)


@pytest.fixture
def client(telegram):
    return TestClient(app)
