"""Tests for HTTPClient error mapping and authentication."""

import pytest
import requests

from agentcheckout.errors import RemoteCallError
from agentcheckout.http_client import HTTPClient, AUTH_BEARER


class FakeResponse:
    def __init__(self, status_code=200, body=None, text=None, reason="OK"):
        self.status_code = status_code
        self._body = body
        self.text = text if text is not None else ("" if body is None else str(body))
        self.reason = reason

    @property
    def ok(self):
        return 200 <= self.status_code < 300

    def json(self):
        if self._body is None:
            raise ValueError("No JSON")
        return self._body


class RecordingRequest:
    def __init__(self, result):
        self.result = result
        self.kwargs = None

    def __call__(self, **kwargs):
        self.kwargs = kwargs
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


def install(monkeypatch, client, result):
    request = RecordingRequest(result)
    monkeypatch.setattr(client.session, "request", request)
    return request


@pytest.fixture
def client():
    return HTTPClient("sk_test", "https://staging.example.com/")


class TestHTTPClient:
    def test_api_key_header(self, client):
        assert client.session.headers["X-API-KEY"] == "sk_test"
        assert "Authorization" not in client.session.headers

    def test_bearer_header(self):
        client = HTTPClient("search-token", "https://search.example.com", auth_scheme=AUTH_BEARER)
        assert client.session.headers["Authorization"] == "Bearer search-token"
        assert "X-API-KEY" not in client.session.headers

    def test_requires_key(self):
        with pytest.raises(ValueError):
            HTTPClient("", "https://staging.example.com")

    def test_url_and_json_body(self, monkeypatch, client):
        request = install(monkeypatch, client, FakeResponse(body={"ok": True}))

        assert client.post("/api/2022-06-09/orders", data={"a": 1}, headers={"X-Chain": "base-sepolia"}) == {"ok": True}

        assert request.kwargs["url"] == "https://staging.example.com/api/2022-06-09/orders"
        assert request.kwargs["method"] == "POST"
        assert request.kwargs["json"] == {"a": 1}
        assert request.kwargs["headers"] == {"X-Chain": "base-sepolia"}
        assert request.kwargs["timeout"] == 30

    def test_array_body(self, monkeypatch, client):
        install(monkeypatch, client, FakeResponse(body=[{"token": "usdc"}]))
        assert client.get("/balances", params={"tokens": "usdc"}) == [{"token": "usdc"}]

    def test_http_error_message(self, monkeypatch, client):
        install(monkeypatch, client, FakeResponse(404, body={"message": "Order not found"}, reason="Not Found"))

        with pytest.raises(RemoteCallError) as exc:
            client.get("/orders/x")

        assert str(exc.value) == "HTTP error! status: 404, message: Order not found"
        assert exc.value.status_code == 404
        assert exc.value.body == {"message": "Order not found"}

    def test_http_error_plain_text(self, monkeypatch, client):
        install(monkeypatch, client, FakeResponse(502, text="Bad Gateway"))

        with pytest.raises(RemoteCallError, match="status: 502, message: Bad Gateway"):
            client.get("/orders/x")

    def test_invalid_json(self, monkeypatch, client):
        install(monkeypatch, client, FakeResponse(200, text="<html>"))

        with pytest.raises(RemoteCallError, match="Invalid JSON response"):
            client.get("/orders/x")

    @pytest.mark.parametrize("error, message", [
        (requests.exceptions.Timeout(), "timed out"),
        (requests.exceptions.ConnectionError(), "Failed to connect"),
        (requests.exceptions.RequestException("bad"), "failed: bad"),
    ])
    def test_transport_errors(self, monkeypatch, client, error, message):
        install(monkeypatch, client, error)

        with pytest.raises(RemoteCallError, match=message) as exc:
            client.get("/orders/x")
        assert exc.value.status_code is None

    def test_context_manager_closes(self, monkeypatch):
        closed = []
        with HTTPClient("sk_test", "https://staging.example.com") as client:
            monkeypatch.setattr(client.session, "close", lambda: closed.append(True))
        assert closed == [True]
