"""Tests for the service endpoints around the notifier."""

from app.middleware import RequestSizeLimitMiddleware


class TestRoot:
    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["name"] == "SendTelegram"

    def test_security_headers(self, client):
        response = client.get("/")
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"

    def test_unknown_path_is_plain_text(self, client):
        response = client.get("/nope")
        assert response.status_code == 404
        assert response.text == "Not Found"


class TestHealth:
    def test_healthy_with_credentials(self, env, client):
        body = client.get("/health").json()
        assert body["status"] == "healthy"
        assert body["checks"] == {"telegram_token": "ok", "telegram_chat_id": "ok"}

    def test_degraded_without_token(self, env, monkeypatch, client):
        monkeypatch.delenv("TELEGRAM_TOKEN")
        body = client.get("/health").json()
        assert body["status"] == "degraded"
        assert body["checks"]["telegram_token"] == "missing"

    def test_secrets_are_not_exposed(self, env, client):
        assert "123:abc" not in client.get("/health").text


class TestRequestSizeLimit:
    def test_oversized_body_is_rejected(self, env, client, telegram):
        body = b"x" * (RequestSizeLimitMiddleware.MAX_BODY_SIZE + 1)
        response = client.post("/api/sendTelegram", content=body)
        assert response.status_code == 413
        assert response.text == "Request body too large. Max size is 2 MB."
        assert telegram.requests == []

    def test_body_at_the_limit_is_accepted(self, env, client, telegram):
        filler = "x" * (RequestSizeLimitMiddleware.MAX_BODY_SIZE - len('{"note": ""}'))
        response = client.post("/api/sendTelegram", content='{"note": "%s"}' % filler)
        assert response.status_code == 200
        assert len(telegram.requests) == 1
