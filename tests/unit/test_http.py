from __future__ import annotations

import pytest
import requests

from ingest_simulate.common.errors import RetryableTransportError, TransportError
from ingest_simulate.common.http import HttpClient, RetryConfig


class FakeResponse:
    def __init__(self, status_code: int, payload=None, raises_json: bool = False):
        self.status_code = status_code
        self._payload = payload
        self._raises_json = raises_json

    def json(self):
        if self._raises_json:
            raise ValueError("bad json")
        return self._payload


def test_http_post_json_success(monkeypatch):
    client = HttpClient(retry=RetryConfig(max_attempts=1), headers={"Authorization": "ApiKey abc"})
    captured = {}

    def fake_request(**kwargs):
        captured.update(kwargs)
        return FakeResponse(200, {"ok": True})

    monkeypatch.setattr(client.session, "request", fake_request)
    payload = client.post_json("https://example.com/_simulate", body={"docs": []}, params={"verbose": "true"})

    assert payload == {"ok": True}
    assert captured["method"] == "POST"
    assert captured["json"] == {"docs": []}
    assert captured["params"] == {"verbose": "true"}
    assert captured["headers"]["Authorization"] == "ApiKey abc"
    assert captured["headers"]["Content-Type"] == "application/json"


def test_http_retryable_status_raises_retryable_error(monkeypatch):
    client = HttpClient(retry=RetryConfig(max_attempts=1))
    monkeypatch.setattr(client.session, "request", lambda **_kwargs: FakeResponse(503, {"x": 1}))

    with pytest.raises(RetryableTransportError):
        client.post_json("https://example.com", body={})


def test_http_retries_until_success(monkeypatch):
    client = HttpClient(retry=RetryConfig(max_attempts=3, multiplier=0.01, max_wait=0.01))
    responses = iter([FakeResponse(429), FakeResponse(200, {"ok": 1})])
    monkeypatch.setattr(client.session, "request", lambda **_kwargs: next(responses))

    assert client.post_json("https://example.com", body={}) == {"ok": 1}


def test_http_client_error_is_not_retried(monkeypatch):
    client = HttpClient(retry=RetryConfig(max_attempts=3, multiplier=0.01, max_wait=0.01))
    calls = []

    def fake_request(**_kwargs):
        calls.append(1)
        return FakeResponse(400, {"error": "bad"})

    monkeypatch.setattr(client.session, "request", fake_request)

    with pytest.raises(TransportError):
        client.post_json("https://example.com", body={})
    assert len(calls) == 1


def test_http_connection_error_is_wrapped(monkeypatch):
    client = HttpClient(retry=RetryConfig(max_attempts=1))

    def fake_request(**_kwargs):
        raise requests.ConnectionError("refused")

    monkeypatch.setattr(client.session, "request", fake_request)

    with pytest.raises(RetryableTransportError):
        client.post_json("https://example.com", body={})


def test_http_invalid_json_raises(monkeypatch):
    client = HttpClient(retry=RetryConfig(max_attempts=1))
    monkeypatch.setattr(client.session, "request", lambda **_kwargs: FakeResponse(200, raises_json=True))

    with pytest.raises(TransportError):
        client.post_json("https://example.com", body={})


def test_from_cluster_config():
    client = HttpClient.from_cluster_config(
        {
            "endpoint": "http://localhost:9200",
            "timeout": {"connect": 1, "read": 2},
            "retry": {"max_attempts": 4, "multiplier": 0.1, "max_wait": 1},
        }
    )
    assert client.timeout.read == 2
    assert client.retry.max_attempts == 4
    client.close()
